"""Repository implementations for infrastructure layer."""

from .chat_repository import ChatRepository
from .content_repository import ContentRepository
from .notification_repository import NotificationRepository
from .profile_repository import ProfileRepository

__all__ = [
    "ChatRepository",
    "ContentRepository",
    "NotificationRepository",
    "ProfileRepository",
]
