"""In-process signals shared by the components of one client session."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any, DefaultDict

logger = logging.getLogger(__name__)

NOTIFICATION_DELETED_ONE = "notification:deleted-one"
NOTIFICATIONS_CLEARED = "notifications:cleared"
NOTIFICATION_RECEIVED = "notification:received"
CHAT_MESSAGE_RECEIVED = "chat:message-received"
CHAT_READ = "chat:read"

SignalHandler = Callable[[Any], None]


class SignalBus:
    """Synchronous publish/subscribe keyed by signal name."""

    def __init__(self) -> None:
        self._handlers: DefaultDict[str, list[SignalHandler]] = defaultdict(list)

    def subscribe(self, name: str, handler: SignalHandler) -> Callable[[], None]:
        """Register ``handler`` for ``name`` and return a function that removes it."""

        self._handlers[name].append(handler)

        def _unsubscribe() -> None:
            handlers = self._handlers.get(name, [])
            if handler in handlers:
                handlers.remove(handler)

        return _unsubscribe

    def emit(self, name: str, payload: Any = None) -> None:
        for handler in list(self._handlers.get(name, ())):
            try:
                handler(payload)
            except Exception:
                logger.exception("Handler for signal %s failed", name)


class UnreadBadges:
    """Unread counters for the notification bell and the chat icon.

    The notification counter follows ``notification:deleted-one`` and
    ``notifications:cleared`` so it never needs a full resync.
    """

    def __init__(
        self,
        bus: SignalBus,
        *,
        on_change: Callable[["UnreadBadges"], None] | None = None,
    ) -> None:
        self.notifications = 0
        self.chats = 0
        self._on_change = on_change
        bus.subscribe(NOTIFICATION_RECEIVED, self._on_received)
        bus.subscribe(NOTIFICATION_DELETED_ONE, self._on_deleted_one)
        bus.subscribe(NOTIFICATIONS_CLEARED, self._on_cleared)
        bus.subscribe(CHAT_MESSAGE_RECEIVED, self._on_chat_message)
        bus.subscribe(CHAT_READ, self._on_chat_read)

    def reset(self, *, notifications: int = 0, chats: int = 0) -> None:
        self.notifications = max(0, notifications)
        self.chats = max(0, chats)
        self._changed()

    def as_dict(self) -> dict[str, int]:
        return {"notifications": self.notifications, "chats": self.chats}

    def _on_received(self, record: Any) -> None:
        if getattr(record, "is_read", False):
            return
        self.notifications += 1
        self._changed()

    def _on_deleted_one(self, _payload: Any) -> None:
        self.notifications = max(0, self.notifications - 1)
        self._changed()

    def _on_cleared(self, _payload: Any) -> None:
        self.notifications = 0
        self._changed()

    def _on_chat_message(self, _payload: Any) -> None:
        self.chats += 1
        self._changed()

    def _on_chat_read(self, _payload: Any) -> None:
        self.chats = 0
        self._changed()

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change(self)


__all__ = [
    "CHAT_MESSAGE_RECEIVED",
    "CHAT_READ",
    "NOTIFICATION_DELETED_ONE",
    "NOTIFICATION_RECEIVED",
    "NOTIFICATIONS_CLEARED",
    "SignalBus",
    "UnreadBadges",
]
