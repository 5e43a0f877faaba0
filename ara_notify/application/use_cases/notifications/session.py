"""Notification state of one connected client."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from ara_notify.config import Settings
from ara_notify.domain.entities import NotificationCategory
from ara_notify.infrastructure.backend import BackendGateway
from ara_notify.infrastructure.notifications import serialize_notification
from ara_notify.infrastructure.realtime import ChangeFeedBroker

from .dedup import DedupCache
from .listener import NotificationListener
from .outbox import ClientOutbox
from .presenter import DismissReason, ToastPresenter
from .resolver import GhostContentResolver
from .signals import (
    CHAT_MESSAGE_RECEIVED,
    CHAT_READ,
    NOTIFICATION_DELETED_ONE,
    NOTIFICATION_RECEIVED,
    NOTIFICATIONS_CLEARED,
    SignalBus,
    UnreadBadges,
)
from .store import NotificationStore

logger = logging.getLogger(__name__)

_FORWARDED_SIGNALS = (
    NOTIFICATION_DELETED_ONE,
    NOTIFICATIONS_CLEARED,
    NOTIFICATION_RECEIVED,
    CHAT_MESSAGE_RECEIVED,
    CHAT_READ,
)


class NotificationSession:
    """Wire the listener, store, toasts and badges of one websocket client.

    Everything the components want the client to do ends up in ``outbox``.
    """

    def __init__(
        self,
        broker: ChangeFeedBroker,
        gateway: BackendGateway,
        settings: Settings,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.outbox = ClientOutbox()
        self.bus = SignalBus()
        self.badges = UnreadBadges(self.bus, on_change=self._push_badges)
        self.dedup = DedupCache(
            window=settings.dedup_window_ms / 1000,
            ttl=settings.dedup_ttl_ms / 1000,
            clock=clock,
        )
        self.store = NotificationStore(gateway, self.bus, self.outbox)
        self.presenter = ToastPresenter(
            self.outbox, duration=settings.toast_duration_ms / 1000, clock=clock
        )
        self.resolver = GhostContentResolver(gateway, self.store, self.presenter, self.outbox)
        self.listener = NotificationListener(
            broker, gateway, self.dedup, self.store, self.presenter, self.bus
        )
        self._gateway = gateway
        for name in _FORWARDED_SIGNALS:
            self.bus.subscribe(name, self._forward_signal(name))

    async def start(self, identity: str | None) -> None:
        """Switch the session to ``identity``; ``None`` signs the user out."""

        epoch = self.store.reset()
        self.presenter.close()
        self.dedup.clear()

        await self.listener.start(identity)
        if identity is None or self.store.epoch != epoch:
            self.badges.reset()
            return

        profile_id = self.listener.profile_id
        self.store.receiver_ref = profile_id
        if profile_id:
            try:
                records = await self._gateway.list_notifications(profile_id)
            except Exception:
                logger.exception("Could not load notifications of profile %s", profile_id)
                records = []
            if self.store.epoch != epoch:
                return
            self.store.load(records)

        self.badges.reset(notifications=self.store.unread_count())
        self.outbox.push(
            "notifications.snapshot",
            {
                "profile_id": profile_id,
                "items": [serialize_notification(record) for record in self.store.records],
                "unread_counts": self.store.unread_counts(),
            },
        )

    async def close(self) -> None:
        self.listener.stop()
        self.presenter.close()
        self.store.reset()
        await self.store.wait_idle()

    async def handle_client_message(self, message: dict[str, Any]) -> None:
        """Apply one interaction sent by the client."""

        message_type = message.get("type")
        target = message.get("id")
        target = str(target) if target is not None else None

        if message_type == "ping":
            self.outbox.push("pong")
        elif message_type == "hover" and target:
            self.presenter.hover(target)
        elif message_type == "leave" and target:
            self.presenter.leave(target)
        elif message_type == "dismiss" and target:
            self.presenter.dismiss(target, DismissReason.CLOSED)
        elif message_type == "click" and target:
            outcome = await self.resolver.resolve(target)
            logger.debug("Click on %s resolved to %s", target, outcome.state.value)
        elif message_type == "mark_read" and target:
            self.store.mark_read(target)
        elif message_type == "delete_request" and target:
            self.store.request_delete(target)
        elif message_type == "delete_cancel":
            self.store.cancel_delete()
        elif message_type == "delete_confirm":
            await self.store.confirm_delete()
        elif message_type == "clear_all":
            await self.store.clear_all()
        elif message_type == "chat_read":
            self.bus.emit(CHAT_READ)
        elif message_type == "filter":
            self._push_filtered(message.get("category"))
        else:
            logger.debug("Ignoring client message %r", message_type)

    def _push_filtered(self, category: Any) -> None:
        try:
            selected = NotificationCategory(category) if category else None
        except ValueError:
            logger.debug("Unknown notification category %r", category)
            return
        self.outbox.push(
            "notifications.filtered",
            {
                "category": selected.value if selected else None,
                "items": [serialize_notification(record) for record in self.store.filter(selected)],
            },
        )

    def _push_badges(self, badges: UnreadBadges) -> None:
        self.outbox.push("badge", badges.as_dict())

    def _forward_signal(self, name: str) -> Callable[[Any], None]:
        def _forward(_payload: Any) -> None:
            self.outbox.push("signal", {"name": name})

        return _forward


__all__ = ["NotificationSession"]
