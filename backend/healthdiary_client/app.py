"""
Health Diary Client — Application Factory
==========================================

What:  Builds the client (bus, storage, HTTP, auth, entry cache, router and
       routes) as one ClientContext and decides the first page.
How:   create_client_app() wires the pieces; start() picks the landing route:
           logged in            → /dashboard
           on "/" or /register  → stay there
           anything else        → /login

Routes:
    /login      LoginView
    /register   RegisterView
    /dashboard  DashboardView   (requires login)
    /           WelcomePage
    *           NotFoundPage
"""

import logging
import sys
from typing import Optional

import httpx

from healthdiary_client import __version__
from healthdiary_client.config import ClientSettings, client_settings
from healthdiary_client.context import ClientContext
from healthdiary_client.core.auth import Auth
from healthdiary_client.core.event_bus import EventBus
from healthdiary_client.core.http_client import HttpClient
from healthdiary_client.core.notifications import ConfirmHook, Notifier
from healthdiary_client.core.router import History, Router
from healthdiary_client.core.storage import SessionStore
from healthdiary_client.services.entry_service import EntryService
from healthdiary_client.views.dashboard import DashboardView
from healthdiary_client.views.login import LoginView
from healthdiary_client.views.pages import NotFoundPage, WelcomePage
from healthdiary_client.views.register import RegisterView

logger = logging.getLogger(__name__)

PUBLIC_LANDING_PATHS = ("/", "/register")


def setup_logging(settings: ClientSettings = client_settings) -> None:
    """Same format as the backend so both logs read alike."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _confirm_everything(message: str) -> bool:
    return True


def create_client_app(
    settings: Optional[ClientSettings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    confirm: Optional[ConfirmHook] = None,
) -> ClientContext:
    """
    Build a fully wired client.

    Args:
        settings:  Defaults to the environment-driven `client_settings`
        transport: httpx transport override (ASGITransport / MockTransport in tests)
        confirm:   Yes/no prompt used before deletes; defaults to always yes
    """
    settings = settings or client_settings

    bus = EventBus()
    session = SessionStore(settings.storage_path)
    http = HttpClient(settings, session, transport=transport)
    auth = Auth(http, session, bus)
    router = Router(session, origin=settings.origin)

    ctx = ClientContext(
        settings=settings,
        bus=bus,
        session=session,
        http=http,
        auth=auth,
        entry_service=EntryService(http, cache_lifetime=settings.cache_lifetime),
        notifier=Notifier(),
        router=router,
        confirm=confirm or _confirm_everything,
    )

    async def end_session() -> None:
        auth.logout()
        ctx.entry_service.clear_cache()
        await router.navigate("/login")

    http.on_unauthorized = end_session

    (
        router
        .add_route("/login", lambda: LoginView(ctx))
        .add_route("/register", lambda: RegisterView(ctx))
        .add_route("/dashboard", lambda: DashboardView(ctx), requires_auth=True)
        .add_route("/", WelcomePage)
        .add_route("*", NotFoundPage)
    )

    logger.info("Health Diary client %s → %s", __version__, settings.api_url)
    return ctx


async def start(ctx: ClientContext, initial_path: str = "/") -> None:
    """Open the client as if the browser had loaded `initial_path`."""
    ctx.router.history = History(initial_path)

    if ctx.auth.is_authenticated():
        target = "/dashboard"
    elif initial_path in PUBLIC_LANDING_PATHS:
        target = initial_path
    else:
        target = "/login"

    if target == initial_path:
        await ctx.router.start()
    else:
        await ctx.router.navigate(target)


async def close(ctx: ClientContext) -> None:
    if ctx.router.current_view is not None and hasattr(ctx.router.current_view, "cleanup"):
        ctx.router.current_view.cleanup()
    await ctx.http.aclose()
