"""
Health Diary Client — Notifications
====================================

What:  Success/error banners shown to the user ("New entry added",
       "Entry deletion failed: ...").
How:   Every notification is logged and kept in a short history; views
       render `latest`.
"""

import logging
from collections import deque
from typing import Awaitable, Callable, NamedTuple, Optional, Union

logger = logging.getLogger(__name__)

SUCCESS = "success"
ERROR = "error"

# Asks the user a yes/no question (the browser confirm dialog); may be async
ConfirmHook = Callable[[str], Union[bool, Awaitable[bool]]]


class Notification(NamedTuple):
    message: str
    level: str


class Notifier:

    def __init__(self, history_size: int = 20):
        self._history = deque(maxlen=history_size)

    def show_success(self, message: str) -> None:
        logger.info("Notification: %s", message)
        self._history.append(Notification(message, SUCCESS))

    def show_error(self, message: str) -> None:
        logger.error("Notification: %s", message)
        self._history.append(Notification(message, ERROR))

    @property
    def latest(self) -> Optional[Notification]:
        return self._history[-1] if self._history else None

    @property
    def history(self):
        return list(self._history)

    def clear(self) -> None:
        self._history.clear()
