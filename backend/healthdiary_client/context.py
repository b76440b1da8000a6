"""
Health Diary Client — Application Context
==========================================

Everything a view needs, built once by create_client_app() and handed to
each view factory. Replaces module-level singletons.
"""

from dataclasses import dataclass

from healthdiary_client.config import ClientSettings
from healthdiary_client.core.auth import Auth
from healthdiary_client.core.event_bus import EventBus
from healthdiary_client.core.http_client import HttpClient
from healthdiary_client.core.notifications import ConfirmHook, Notifier
from healthdiary_client.core.router import Router
from healthdiary_client.core.storage import SessionStore
from healthdiary_client.services.entry_service import EntryService


@dataclass
class ClientContext:
    settings: ClientSettings
    bus: EventBus
    session: SessionStore
    http: HttpClient
    auth: Auth
    entry_service: EntryService
    notifier: Notifier
    router: Router
    confirm: ConfirmHook
