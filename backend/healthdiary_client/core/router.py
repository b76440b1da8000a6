"""
Health Diary Client — Router
=============================

What:  Maps paths to views, guards authenticated routes and runs the view
       lifecycle on every navigation.
How:   A navigation is:
           1. reduce full URLs to their path
           2. exact route match, else the "*" route
           3. guarded route without a stored token → navigate to /login
           4. push onto History (skipped for back/forward)
           5. cleanup() the previous view
           6. render the new view into the RootContainer
           7. initialize() the new view (may be async)

A view is any object with `render() -> str`; `initialize()` and `cleanup()`
are optional. Views are built fresh from their factory on each navigation.
"""

import inspect
import logging
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlsplit

from healthdiary_client.core.storage import SessionStore
from healthdiary_client.exceptions import RouteNotFoundError

logger = logging.getLogger(__name__)

WILDCARD = "*"
LOGIN_PATH = "/login"


class RootContainer:
    """Where the current view's markup is rendered."""

    def __init__(self):
        self.content = ""

    def render(self, markup: str) -> None:
        self.content = markup


class History:
    """Browser-style history: pushing drops any forward entries."""

    def __init__(self, initial_path: str = "/"):
        self._entries: List[str] = [initial_path]
        self._index = 0

    @property
    def current(self) -> str:
        return self._entries[self._index]

    def push(self, path: str) -> None:
        del self._entries[self._index + 1:]
        self._entries.append(path)
        self._index += 1

    def replace(self, path: str) -> None:
        self._entries[self._index] = path

    def back(self) -> Optional[str]:
        if self._index == 0:
            return None
        self._index -= 1
        return self.current

    def forward(self) -> Optional[str]:
        if self._index >= len(self._entries) - 1:
            return None
        self._index += 1
        return self.current

    def __len__(self) -> int:
        return len(self._entries)


class Route:
    __slots__ = ("path", "view_factory", "requires_auth")

    def __init__(self, path: str, view_factory: Callable[[], Any], requires_auth: bool = False):
        self.path = path
        self.view_factory = view_factory
        self.requires_auth = requires_auth


async def _maybe_await(outcome: Any) -> None:
    if inspect.isawaitable(outcome):
        await outcome


class Router:

    def __init__(
        self,
        session: SessionStore,
        origin: str = "",
        root: Optional[RootContainer] = None,
        history: Optional[History] = None,
    ):
        self.session = session
        self.origin = origin.rstrip("/")
        self.root = root or RootContainer()
        self.history = history or History()
        self.routes: Dict[str, Route] = {}
        self.current_view: Any = None
        self.current_path: Optional[str] = None

    def add_route(self, path: str, view_factory: Callable[[], Any], requires_auth: bool = False) -> "Router":
        self.routes[path] = Route(path, view_factory, requires_auth)
        return self

    def _match(self, path: str) -> Route:
        route = self.routes.get(path) or self.routes.get(WILDCARD)
        if route is None:
            raise RouteNotFoundError(path)
        return route

    @staticmethod
    def _to_path(target: str) -> str:
        return urlsplit(target).path or "/"

    def _has_token(self) -> bool:
        return bool(self.session.local.get(SessionStore.TOKEN_KEY))

    async def navigate(self, path: str, push: bool = True) -> None:
        """
        Show the view for `path`.

        Raises:
            RouteNotFoundError: no route matches and no "*" route exists
        """
        path = self._to_path(path)
        route = self._match(path)

        if route.requires_auth and not self._has_token():
            logger.info("'%s' requires login, redirecting to %s", path, LOGIN_PATH)
            if not push:
                # Back/forward landed on a guarded page; keep History on what is shown
                self.history.replace(LOGIN_PATH)
            await self.navigate(LOGIN_PATH, push=push)
            return

        if push:
            self.history.push(path)

        previous = self.current_view
        if previous is not None and hasattr(previous, "cleanup"):
            previous.cleanup()

        view = route.view_factory()
        self.root.render(view.render())
        self.current_view = view
        self.current_path = path
        logger.debug("Navigated to %s (%s)", path, type(view).__name__)

        if hasattr(view, "initialize"):
            await _maybe_await(view.initialize())

    async def handle_link_click(self, href: str) -> bool:
        """
        Route a clicked link through navigate() when it stays on this origin.

        Returns:
            True if the click was handled, False if it should be left alone
        """
        parts = urlsplit(href)
        if parts.scheme or parts.netloc:
            if parts.scheme not in ("http", "https"):
                return False
            if f"{parts.scheme}://{parts.netloc}" != self.origin:
                return False
        elif not parts.path:
            return False

        await self.navigate(href)
        return True

    async def back(self) -> bool:
        path = self.history.back()
        if path is None:
            return False
        await self.navigate(path, push=False)
        return True

    async def forward(self) -> bool:
        path = self.history.forward()
        if path is None:
            return False
        await self.navigate(path, push=False)
        return True

    async def start(self) -> None:
        await self.navigate(self.history.current, push=False)
