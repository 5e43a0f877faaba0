"""Asynchronous facade over the hosted backend tables.

Repository calls are blocking SQLAlchemy operations, so each one runs in a
worker thread with its own session while the event loop keeps serving other
change events and client interactions.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TypeVar

from anyio import to_thread
from sqlalchemy.orm import Session, sessionmaker

from ara_notify.domain.entities import (
    AttachmentType,
    ChatParticipants,
    NotificationRecord,
    SenderProfile,
)
from ara_notify.infrastructure.repositories import (
    ChatRepository,
    ContentRepository,
    NotificationRepository,
    ProfileRepository,
)

T = TypeVar("T")


class BackendGateway:
    """Point reads and mutations used by the notification subsystem."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    async def _run(self, operation: Callable[[Session], T]) -> T:
        def _call() -> T:
            with self._session_factory() as session:
                return operation(session)

        return await to_thread.run_sync(_call)

    async def fetch_profile_id(self, user_id: str) -> str | None:
        return await self._run(lambda s: ProfileRepository(s).get_id_by_user_id(user_id))

    async def fetch_profile(self, profile_id: str) -> SenderProfile | None:
        return await self._run(lambda s: ProfileRepository(s).get(profile_id))

    async def fetch_profile_by_user_id(self, user_id: str) -> SenderProfile | None:
        return await self._run(lambda s: ProfileRepository(s).get_by_user_id(user_id))

    async def reply_exists(self, reply_id: str) -> bool:
        return await self._run(lambda s: ContentRepository(s).reply_exists(reply_id))

    async def fetch_tweet_content(self, tweet_id: str) -> str | None:
        return await self._run(lambda s: ContentRepository(s).get_tweet_content(tweet_id))

    async def fetch_reply_content(self, reply_id: str) -> str | None:
        return await self._run(lambda s: ContentRepository(s).get_reply_content(reply_id))

    async def fetch_chat_participants(self, chat_id: str) -> ChatParticipants | None:
        return await self._run(lambda s: ChatRepository(s).get_participants(chat_id))

    async def fetch_attachment_types(self, message_id: str) -> list[AttachmentType]:
        return await self._run(lambda s: ChatRepository(s).list_attachment_types(message_id))

    async def list_notifications(self, receiver_id: str) -> Sequence[NotificationRecord]:
        return await self._run(lambda s: NotificationRepository(s).list_for_receiver(receiver_id))

    async def mark_notification_read(self, notification_id: str) -> bool:
        return await self._run(lambda s: NotificationRepository(s).mark_as_read(notification_id))

    async def delete_notification(self, notification_id: str) -> bool:
        return await self._run(lambda s: NotificationRepository(s).delete(notification_id))

    async def delete_notifications_for(self, receiver_id: str) -> int:
        return await self._run(
            lambda s: NotificationRepository(s).delete_for_receiver(receiver_id)
        )


__all__ = ["BackendGateway"]
