"""In-process fan-out of backend change events to per-user subscriptions."""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from .events import ChangeEvent

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[ChangeEvent], Awaitable[None]]


@dataclass(frozen=True)
class StreamFilter:
    """Selects the events of one table, optionally narrowed by ``column=eq.value``."""

    table: str
    column: str | None = None
    value: str | None = None

    @classmethod
    def parse(cls, table: str, expression: str | None = None) -> "StreamFilter":
        """Build a filter from the backend's ``column=eq.value`` notation."""

        if not expression:
            return cls(table=table)
        column, separator, condition = expression.partition("=")
        operator, dot, value = condition.partition(".")
        if not separator or not dot or operator != "eq" or not column or not value:
            raise ValueError(f"Unsupported stream filter: {expression!r}")
        return cls(table=table, column=column, value=value)

    def matches(self, event: ChangeEvent) -> bool:
        if event.table != self.table:
            return False
        if self.column is None:
            return True
        actual = getattr(event.record, self.column, None)
        return actual is not None and str(actual) == self.value


@dataclass(frozen=True)
class SubscriptionHandle:
    """Token returned by :meth:`ChangeFeedBroker.subscribe`."""

    id: int
    channel: str
    stream: StreamFilter


class ChangeFeedBroker:
    """Route change events to the callbacks subscribed to matching streams.

    A channel name identifies one logical stream; subscribing again under the
    same name replaces the previous subscription.
    """

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._subscriptions: dict[int, tuple[SubscriptionHandle, ChangeCallback]] = {}
        self._channels: dict[str, int] = {}

    @property
    def active_channels(self) -> list[str]:
        return sorted(self._channels)

    def subscribe(
        self, channel: str, stream: StreamFilter, callback: ChangeCallback
    ) -> SubscriptionHandle:
        """Register ``callback`` for the events matching ``stream``."""

        previous = self._channels.get(channel)
        if previous is not None:
            logger.warning("Channel %s was already open; replacing subscription", channel)
            self._drop(previous)

        handle = SubscriptionHandle(id=next(self._ids), channel=channel, stream=stream)
        self._subscriptions[handle.id] = (handle, callback)
        self._channels[channel] = handle.id
        logger.debug("Subscribed %s to %s", channel, stream)
        return handle

    def unsubscribe(self, handle: SubscriptionHandle) -> None:
        """Close ``handle``; closing an already closed handle does nothing."""

        if handle.id in self._subscriptions:
            self._drop(handle.id)
            logger.debug("Unsubscribed %s", handle.channel)

    def _drop(self, subscription_id: int) -> None:
        handle, _ = self._subscriptions.pop(subscription_id)
        if self._channels.get(handle.channel) == subscription_id:
            del self._channels[handle.channel]

    async def publish(self, event: ChangeEvent) -> int:
        """Deliver ``event`` to every matching subscription.

        A failing callback is logged and does not prevent delivery to the
        others. Returns the number of subscriptions the event matched.
        """

        targets = [
            (handle, callback)
            for handle, callback in list(self._subscriptions.values())
            if handle.stream.matches(event)
        ]
        if not targets:
            return 0

        results = await asyncio.gather(
            *(callback(event) for _, callback in targets), return_exceptions=True
        )
        for (handle, _), result in zip(targets, results):
            if isinstance(result, Exception):
                logger.error(
                    "Subscriber %s failed to handle %s event",
                    handle.channel,
                    event.table,
                    exc_info=result,
                )
        return len(targets)


__all__ = ["ChangeCallback", "ChangeFeedBroker", "StreamFilter", "SubscriptionHandle"]
