"""Ordered queue of messages addressed to one connected client."""

from __future__ import annotations

import asyncio
from typing import Any


class ClientOutbox:
    """Collect UI instructions produced synchronously by the session components.

    Messages are drained by the websocket publisher in the order they were
    pushed.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue()

    def push(self, message_type: str, data: Any = None) -> None:
        message: dict[str, Any] = {"type": message_type}
        if data is not None:
            message["data"] = data
        self._queue.put_nowait(message)

    def notify(self, level: str, key: str, text: str) -> None:
        """Queue a transient user-facing message."""

        self.push("message", {"level": level, "key": key, "text": text})

    async def get(self) -> dict[str, Any]:
        return await self._queue.get()

    def drain(self) -> list[dict[str, Any]]:
        """Return and remove every queued message without waiting."""

        messages: list[dict[str, Any]] = []
        while True:
            try:
                messages.append(self._queue.get_nowait())
            except asyncio.QueueEmpty:
                return messages


__all__ = ["ClientOutbox"]
