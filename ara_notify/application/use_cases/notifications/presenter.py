"""Lifecycle of the transient toasts shown for delivered events."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from . import countdown
from .outbox import ClientOutbox

logger = logging.getLogger(__name__)


class DismissReason(str, Enum):
    EXPIRED = "expired"
    CLOSED = "closed"
    NAVIGATED = "navigated"


@dataclass
class ToastInstance:
    """One toast on screen with its own countdown."""

    toast_id: str
    notification_id: str | None
    state: countdown.Countdown
    timer: asyncio.TimerHandle | None = field(default=None, repr=False)


class ToastPresenter:
    """Show toasts and dismiss them when their unpaused lifetime runs out.

    Each toast owns an independent timer; hovering pauses it, leaving resumes
    it with the remaining time.
    """

    def __init__(
        self,
        outbox: ClientOutbox,
        *,
        duration: float = 4.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._outbox = outbox
        self._duration = duration
        self._clock = clock
        self._toasts: dict[str, ToastInstance] = {}

    def __contains__(self, toast_id: object) -> bool:
        return toast_id in self._toasts

    def show(
        self, toast_id: str, payload: dict[str, Any], *, notification_id: str | None = None
    ) -> ToastInstance:
        existing = self._toasts.pop(toast_id, None)
        if existing is not None:
            self._cancel_timer(existing)

        instance = ToastInstance(
            toast_id=toast_id,
            notification_id=notification_id,
            state=countdown.start(self._clock(), self._duration),
        )
        self._toasts[toast_id] = instance
        self._schedule(instance)
        self._outbox.push("toast.show", payload)
        return instance

    def hover(self, toast_id: str) -> bool:
        instance = self._toasts.get(toast_id)
        if instance is None:
            return False
        self._cancel_timer(instance)
        instance.state = countdown.pause(instance.state, self._clock())
        return True

    def leave(self, toast_id: str) -> bool:
        instance = self._toasts.get(toast_id)
        if instance is None:
            return False
        instance.state = countdown.resume(instance.state, self._clock())
        self._cancel_timer(instance)
        self._schedule(instance)
        return True

    def dismiss(self, toast_id: str, reason: DismissReason = DismissReason.CLOSED) -> bool:
        instance = self._toasts.pop(toast_id, None)
        if instance is None:
            return False
        self._cancel_timer(instance)
        self._outbox.push("toast.dismiss", {"id": toast_id, "reason": reason.value})
        return True

    def dismiss_for_notification(
        self, notification_id: str, reason: DismissReason = DismissReason.NAVIGATED
    ) -> int:
        toast_ids = [
            toast_id
            for toast_id, instance in self._toasts.items()
            if instance.notification_id == notification_id
        ]
        for toast_id in toast_ids:
            self.dismiss(toast_id, reason)
        return len(toast_ids)

    def sweep(self) -> list[str]:
        """Dismiss every toast whose countdown has run out; return their ids."""

        now = self._clock()
        expired = [
            toast_id
            for toast_id, instance in self._toasts.items()
            if countdown.is_expired(instance.state, now)
        ]
        for toast_id in expired:
            self.dismiss(toast_id, DismissReason.EXPIRED)
        return expired

    def close(self) -> None:
        """Drop every toast without notifying the client."""

        for instance in self._toasts.values():
            self._cancel_timer(instance)
        self._toasts.clear()

    def _schedule(self, instance: ToastInstance) -> None:
        if not isinstance(instance.state, countdown.Running):
            return
        delay = countdown.remaining(instance.state, self._clock())
        loop = asyncio.get_running_loop()
        instance.timer = loop.call_later(delay, self._expire, instance.toast_id)

    def _expire(self, toast_id: str) -> None:
        instance = self._toasts.get(toast_id)
        if instance is None:
            return
        instance.timer = None
        if countdown.is_expired(instance.state, self._clock()):
            self.dismiss(toast_id, DismissReason.EXPIRED)
        elif isinstance(instance.state, countdown.Running):
            logger.debug("Toast %s woke up early; rescheduling", toast_id)
            self._schedule(instance)

    @staticmethod
    def _cancel_timer(instance: ToastInstance) -> None:
        if instance.timer is not None:
            instance.timer.cancel()
            instance.timer = None


__all__ = ["DismissReason", "ToastInstance", "ToastPresenter"]
