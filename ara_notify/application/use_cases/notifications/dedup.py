"""Suppression of change events delivered more than once in quick succession."""

from __future__ import annotations

import time
from collections.abc import Callable, Hashable

from ara_notify.domain.entities import DirectMessage, NotificationRecord

DedupKey = tuple[Hashable, ...]


def notification_key(record: NotificationRecord) -> DedupKey:
    """Composite key of the logical action behind ``record``.

    The row id is left out on purpose: trigger side effects insert distinct
    rows for the same action.
    """

    return (
        record.sender_ref,
        record.receiver_ref,
        record.type.value,
        record.sub_target_entity_ref,
        record.target_entity_ref,
    )


def direct_message_key(message: DirectMessage, receiver_ref: str | None) -> DedupKey:
    return (message.sender_id, receiver_ref, "chat", message.id, message.chat_id)


class DedupCache:
    """Time-windowed key to last-seen map.

    Entries older than ``ttl`` are evicted on every call, so no background
    timer is needed to bound memory.
    """

    def __init__(
        self,
        *,
        window: float = 0.5,
        ttl: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if window > ttl:
            raise ValueError("Dedup window must not exceed the entry ttl")
        self._window = window
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[DedupKey, float] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def should_deliver(self, key: DedupKey) -> bool:
        now = self._clock()
        self._evict(now)
        last_seen = self._entries.get(key)
        if last_seen is not None and now - last_seen < self._window:
            return False
        self._entries[key] = now
        return True

    def clear(self) -> None:
        self._entries.clear()

    def _evict(self, now: float) -> None:
        expired = [key for key, seen in self._entries.items() if now - seen >= self._ttl]
        for key in expired:
            del self._entries[key]


__all__ = ["DedupCache", "DedupKey", "direct_message_key", "notification_key"]
