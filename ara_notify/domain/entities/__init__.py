"""Domain entities exposed by the application."""

from .direct_message import AttachmentType, ChatParticipants, DirectMessage
from .navigation import ClickOutcome, Navigation, ResolutionState
from .notification import (
    CATEGORY_TYPES,
    UNKNOWN_SENDER_NAME,
    NotificationCategory,
    NotificationRecord,
    NotificationType,
    SenderProfile,
    category_for,
)

__all__ = [
    "AttachmentType",
    "ChatParticipants",
    "DirectMessage",
    "ClickOutcome",
    "Navigation",
    "ResolutionState",
    "CATEGORY_TYPES",
    "UNKNOWN_SENDER_NAME",
    "NotificationCategory",
    "NotificationRecord",
    "NotificationType",
    "SenderProfile",
    "category_for",
]
