"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from ara_notify.domain.entities import NotificationCategory, NotificationRecord, NotificationType


class SenderRead(BaseModel):
    """Public profile of the user who triggered a notification."""

    id: str | None = None
    nickname: str
    username: str | None = None
    avatar_url: str | None = None


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: str
    type: NotificationType
    category: NotificationCategory
    sender_id: str | None = None
    receiver_id: str
    content: str | None = None
    tweet_id: str | None = None
    comment_id: str | None = None
    is_read: bool
    created_at: datetime | None = None
    sender: SenderRead | None = None

    @classmethod
    def from_record(cls, record: NotificationRecord) -> "NotificationRead":
        sender = record.sender
        return cls(
            id=record.id,
            type=record.type,
            category=record.category,
            sender_id=record.sender_ref,
            receiver_id=record.receiver_ref,
            content=record.content_snapshot,
            tweet_id=record.target_entity_ref,
            comment_id=record.sub_target_entity_ref,
            is_read=record.is_read,
            created_at=record.created_at,
            sender=SenderRead(
                id=sender.id,
                nickname=sender.nickname,
                username=sender.username,
                avatar_url=sender.avatar_url,
            )
            if sender
            else None,
        )


class UnreadCountsRead(BaseModel):
    """Unread notifications, in total and per category tab."""

    total: int = Field(..., ge=0)
    by_category: dict[str, int] = Field(default_factory=dict)


__all__ = ["NotificationRead", "SenderRead", "UnreadCountsRead"]
