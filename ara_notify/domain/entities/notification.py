"""Domain entities describing social notifications delivered to a user."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

UNKNOWN_SENDER_NAME = "Unknown user"


class NotificationType(str, Enum):
    """Kinds of notification rows created by the backend."""

    LIKE = "like"
    COMMENT = "comment"
    REPOST = "repost"
    MENTION = "mention"
    FOLLOW = "follow"
    REPLY = "reply"
    SYSTEM = "system"
    LIKE_COMMENT = "like_comment"
    LIKE_FEED = "like_feed"


class NotificationCategory(str, Enum):
    """Tabs of the notifications page."""

    LIKE = "like"
    COMMENT = "comment"
    FOLLOW = "follow"
    SYSTEM = "system"
    UPDATES = "updates"


CATEGORY_TYPES: dict[NotificationCategory, frozenset[NotificationType]] = {
    NotificationCategory.LIKE: frozenset(
        {NotificationType.LIKE, NotificationType.LIKE_COMMENT, NotificationType.LIKE_FEED}
    ),
    NotificationCategory.COMMENT: frozenset(
        {NotificationType.COMMENT, NotificationType.REPLY, NotificationType.MENTION}
    ),
    NotificationCategory.FOLLOW: frozenset({NotificationType.FOLLOW}),
    NotificationCategory.SYSTEM: frozenset({NotificationType.SYSTEM}),
    NotificationCategory.UPDATES: frozenset({NotificationType.REPOST}),
}


def category_for(notification_type: NotificationType) -> NotificationCategory:
    """Return the tab that lists notifications of ``notification_type``."""

    for category, types in CATEGORY_TYPES.items():
        if notification_type in types:
            return category
    raise ValueError(f"No category declared for notification type {notification_type!r}")


@dataclass
class SenderProfile:
    """Public profile fields shown next to a notification."""

    id: str | None
    nickname: str
    username: str | None = None
    avatar_url: str | None = None

    @classmethod
    def unknown(cls, profile_id: str | None = None) -> "SenderProfile":
        return cls(id=profile_id, nickname=UNKNOWN_SENDER_NAME)

    @property
    def handle(self) -> str | None:
        """Name used in profile URLs; ``None`` when the profile has no username."""

        return self.username or None


@dataclass
class NotificationRecord:
    """Local mirror of a row of the ``notifications`` table.

    ``target_entity_ref`` points at a feed post and ``sub_target_entity_ref``
    at a comment inside it. A comment always belongs to a post, so a record
    carrying a sub target without a target is rejected.
    """

    id: str
    type: NotificationType
    sender_ref: str | None
    receiver_ref: str
    content_snapshot: str | None = None
    target_entity_ref: str | None = None
    sub_target_entity_ref: str | None = None
    is_read: bool = False
    created_at: datetime | None = None
    sender: SenderProfile | None = None

    def __post_init__(self) -> None:
        if self.sub_target_entity_ref and not self.target_entity_ref:
            raise ValueError(
                f"Notification {self.id} references comment {self.sub_target_entity_ref} without its post"
            )

    @property
    def category(self) -> NotificationCategory:
        return category_for(self.type)

    @property
    def is_system(self) -> bool:
        return self.type is NotificationType.SYSTEM


__all__ = [
    "CATEGORY_TYPES",
    "NotificationCategory",
    "NotificationRecord",
    "NotificationType",
    "SenderProfile",
    "UNKNOWN_SENDER_NAME",
    "category_for",
]
