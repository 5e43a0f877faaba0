"""Client-side mirror of the receiver's notification list."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine, Iterable
from datetime import datetime
from typing import Any

from ara_notify.domain.entities import (
    CATEGORY_TYPES,
    NotificationCategory,
    NotificationRecord,
)
from ara_notify.infrastructure.backend import BackendGateway
from ara_notify.infrastructure.notifications import serialize_notification

from .outbox import ClientOutbox
from .presentation import MESSAGE_TEXTS
from .signals import NOTIFICATION_DELETED_ONE, NOTIFICATIONS_CLEARED, SignalBus

logger = logging.getLogger(__name__)


def _sort_key(record: NotificationRecord) -> float:
    created_at: datetime | None = record.created_at
    return created_at.timestamp() if created_at else float("-inf")


class NotificationStore:
    """Notification list with optimistic mutations.

    Local state changes first; the backend request follows. Background
    requests (mark-read, silent delete) never roll back on failure, while
    explicit deletes and clear-all report failures to the user.
    """

    def __init__(self, gateway: BackendGateway, bus: SignalBus, outbox: ClientOutbox) -> None:
        self._gateway = gateway
        self._bus = bus
        self._outbox = outbox
        self._records: list[NotificationRecord] = []
        self._pending_delete_id: str | None = None
        self._tasks: set[asyncio.Task] = set()
        self.receiver_ref: str | None = None
        self.epoch = 0

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> list[NotificationRecord]:
        return list(self._records)

    @property
    def pending_delete_id(self) -> str | None:
        return self._pending_delete_id

    def reset(self, receiver_ref: str | None = None) -> int:
        """Forget the current list; results of requests started before are discarded."""

        self.epoch += 1
        self.receiver_ref = receiver_ref
        self._records = []
        self._pending_delete_id = None
        return self.epoch

    def get(self, notification_id: str) -> NotificationRecord | None:
        for record in self._records:
            if record.id == notification_id:
                return record
        return None

    def contains(self, notification_id: str) -> bool:
        return self.get(notification_id) is not None

    def load(self, records: Iterable[NotificationRecord]) -> None:
        """Merge a fetched snapshot with rows that arrived while it was loading."""

        known = {record.id for record in self._records}
        merged = self._records + [record for record in records if record.id not in known]
        merged.sort(key=_sort_key, reverse=True)
        self._records = merged

    def insert(self, record: NotificationRecord) -> bool:
        """Prepend ``record``; rows older than the head are slotted in by ``created_at``."""

        if self.contains(record.id):
            return False

        index = 0
        key = _sort_key(record)
        while index < len(self._records) and _sort_key(self._records[index]) > key:
            index += 1
        if index:
            logger.debug("Notification %s arrived out of order; inserted at %s", record.id, index)
        self._records.insert(index, record)
        self._outbox.push("notification.inserted", {"index": index, **serialize_notification(record)})
        return True

    def filter(self, category: NotificationCategory | None = None) -> list[NotificationRecord]:
        if category is None:
            return list(self._records)
        types = CATEGORY_TYPES[category]
        return [record for record in self._records if record.type in types]

    def unread_count(self) -> int:
        return sum(1 for record in self._records if not record.is_read)

    def unread_counts(self) -> dict[str, int]:
        counts = {category.value: 0 for category in NotificationCategory}
        for record in self._records:
            if not record.is_read:
                counts[record.category.value] += 1
        return counts

    def mark_read(self, notification_id: str) -> bool:
        """Flip ``is_read`` locally and persist in the background.

        Returns ``False`` when the record is unknown or already read, in which
        case no backend request is made.
        """

        record = self.get(notification_id)
        if record is None or record.is_read:
            return False
        record.is_read = True
        self._bus.emit(NOTIFICATION_DELETED_ONE, record)
        self._outbox.push("notification.read", {"id": notification_id})
        self._spawn(self._persist_read(notification_id))
        return True

    def request_delete(self, notification_id: str) -> bool:
        """First phase of an explicit delete: ask the user to confirm."""

        if not self.contains(notification_id):
            return False
        self._pending_delete_id = notification_id
        self._outbox.push("notification.delete_requested", {"id": notification_id})
        return True

    def cancel_delete(self) -> None:
        self._pending_delete_id = None

    async def confirm_delete(self) -> bool:
        notification_id = self._pending_delete_id
        self._pending_delete_id = None
        if notification_id is None:
            return False

        record = self._remove(notification_id)
        if record is None:
            return False

        try:
            await self._gateway.delete_notification(notification_id)
        except Exception:
            logger.exception("Failed to delete notification %s", notification_id)
            self._message("error", "common.error_delete")
            return False

        self._message("success", "common.success_delete")
        return True

    def silent_delete(self, notification_id: str) -> bool:
        """Remove a stale notification without asking the user."""

        record = self._remove(notification_id)
        if record is None:
            return False
        self._spawn(self._persist_silent_delete(notification_id))
        return True

    async def clear_all(self) -> bool:
        receiver_ref = self.receiver_ref
        self._records = []
        self._pending_delete_id = None
        self._bus.emit(NOTIFICATIONS_CLEARED)
        self._outbox.push("notifications.cleared")

        if receiver_ref is None:
            return True

        try:
            await self._gateway.delete_notifications_for(receiver_ref)
        except Exception:
            logger.exception("Failed to clear notifications of %s", receiver_ref)
            self._message("error", "notification.error_clear_all")
            return False

        self._message("success", "notification.success_clear_all")
        return True

    async def wait_idle(self) -> None:
        """Wait for the background requests started so far."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _remove(self, notification_id: str) -> NotificationRecord | None:
        record = self.get(notification_id)
        if record is None:
            return None
        self._records.remove(record)
        if self._pending_delete_id == notification_id:
            self._pending_delete_id = None
        if not record.is_read:
            self._bus.emit(NOTIFICATION_DELETED_ONE, record)
        self._outbox.push("notification.removed", {"id": notification_id})
        return record

    def _message(self, level: str, key: str) -> None:
        self._outbox.notify(level, key, MESSAGE_TEXTS[key])

    def _spawn(self, coroutine: Coroutine[Any, Any, None]) -> None:
        task = asyncio.get_running_loop().create_task(coroutine)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _persist_read(self, notification_id: str) -> None:
        try:
            await self._gateway.mark_notification_read(notification_id)
        except Exception:
            logger.warning("Could not mark notification %s as read", notification_id, exc_info=True)

    async def _persist_silent_delete(self, notification_id: str) -> None:
        try:
            await self._gateway.delete_notification(notification_id)
        except Exception:
            logger.warning("Could not delete stale notification %s", notification_id, exc_info=True)


__all__ = ["NotificationStore"]
