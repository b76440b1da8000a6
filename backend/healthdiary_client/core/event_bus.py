"""
Health Diary Client — Event Bus
================================

What:  In-process publish/subscribe keyed by exact topic strings.
Why:   The calendar, chart, entry list and entry form never reference each
       other; they only publish and react to topics.

Delivery:
    - Synchronous, in subscription order.
    - Over a snapshot taken at publish time, so handlers may subscribe or
      unsubscribe (themselves included) while being called.
    - A failing handler is logged and skipped by default; with
      isolate_errors=False the first failure propagates to the publisher
      and the remaining handlers are not called.
"""

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Any]


class Topics:
    """Topic names used by the dashboard components."""
    ENTRIES_UPDATED = "entries:updated"
    MONTH_CHANGED = "calendar:month-changed"
    DATE_SELECTED = "date:selected"
    ENTRIES_LIST = "entries:list"
    ENTRY_SELECTED = "entry:selected"
    AUTH_LOGIN = "auth:login"
    AUTH_LOGOUT = "auth:logout"


class _Subscription:
    # Wrapper so the same function subscribed twice is two registrations
    __slots__ = ("handler",)

    def __init__(self, handler: Handler):
        self.handler = handler


class EventBus:

    def __init__(self, isolate_errors: bool = True):
        self.isolate_errors = isolate_errors
        self._subscribers: Dict[str, List[_Subscription]] = defaultdict(list)

    def subscribe(self, topic: str, handler: Handler) -> Callable[[], None]:
        """
        Register `handler` for `topic`.

        Returns:
            A function that removes exactly this registration. Calling it
            more than once is harmless.
        """
        subscription = _Subscription(handler)
        self._subscribers[topic].append(subscription)

        def unsubscribe() -> None:
            subscriptions = self._subscribers.get(topic)
            if not subscriptions:
                return
            for index, existing in enumerate(subscriptions):
                if existing is subscription:
                    del subscriptions[index]
                    break
            if not subscriptions:
                del self._subscribers[topic]

        return unsubscribe

    def publish(self, topic: str, payload: Any = None) -> None:
        subscriptions = self._subscribers.get(topic)
        if not subscriptions:
            return

        for subscription in list(subscriptions):
            if not self.isolate_errors:
                subscription.handler(payload)
                continue
            try:
                subscription.handler(payload)
            except Exception as e:
                logger.error(
                    "Handler %r for '%s' failed: %s",
                    subscription.handler, topic, str(e), exc_info=True,
                )

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, ()))
