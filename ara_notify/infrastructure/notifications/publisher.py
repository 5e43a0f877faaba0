"""Utility helpers to push session messages to websocket subscribers."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from fastapi import WebSocket

from ara_notify.domain.entities import NotificationRecord, SenderProfile

if TYPE_CHECKING:
    from ara_notify.application.use_cases.notifications.outbox import ClientOutbox

logger = logging.getLogger(__name__)


def serialize_sender(sender: SenderProfile | None) -> dict[str, Any] | None:
    """Return the websocket payload representation for ``sender``."""

    if sender is None:
        return None
    return {
        "id": sender.id,
        "nickname": sender.nickname,
        "username": sender.username,
        "avatar_url": sender.avatar_url,
    }


def serialize_notification(record: NotificationRecord) -> dict[str, Any]:
    """Return the websocket payload representation for ``record``."""

    return {
        "id": record.id,
        "type": record.type.value,
        "category": record.category.value,
        "sender_id": record.sender_ref,
        "receiver_id": record.receiver_ref,
        "content": record.content_snapshot,
        "tweet_id": record.target_entity_ref,
        "comment_id": record.sub_target_entity_ref,
        "is_read": record.is_read,
        "created_at": record.created_at.isoformat() if record.created_at else None,
        "sender": serialize_sender(record.sender),
    }


class WebSocketPublisher:
    """Forward the messages queued for one client to its websocket."""

    def __init__(self, outbox: "ClientOutbox", websocket: WebSocket) -> None:
        self._outbox = outbox
        self._websocket = websocket
        self._task: asyncio.Task | None = None

    async def run(self) -> None:
        """Send queued messages until the task is cancelled or the socket fails."""

        while True:
            message = await self._outbox.get()
            await self._websocket.send_json(message)
            logger.debug("Sent %s message to client", message.get("type"))

    def start(self) -> asyncio.Task:
        self._task = asyncio.get_running_loop().create_task(self.run())
        return self._task

    async def stop(self) -> None:
        """Cancel the forwarding task and collect its outcome."""

        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.warning("Websocket publisher stopped after a send failure", exc_info=True)


__all__ = ["WebSocketPublisher", "serialize_notification", "serialize_sender"]
