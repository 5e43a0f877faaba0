"""Use cases that keep a connected client's notifications in sync."""

from .dedup import DedupCache, direct_message_key, notification_key
from .listener import NotificationListener
from .outbox import ClientOutbox
from .presentation import (
    MESSAGE_TEXTS,
    ToastKind,
    build_chat_toast,
    build_notification_toast,
    sanitize_content,
    style_for,
)
from .presenter import DismissReason, ToastPresenter
from .resolver import GhostContentResolver
from .session import NotificationSession
from .signals import SignalBus, UnreadBadges
from .store import NotificationStore

__all__ = [
    "ClientOutbox",
    "DedupCache",
    "DismissReason",
    "GhostContentResolver",
    "MESSAGE_TEXTS",
    "NotificationListener",
    "NotificationSession",
    "NotificationStore",
    "SignalBus",
    "ToastKind",
    "ToastPresenter",
    "UnreadBadges",
    "build_chat_toast",
    "build_notification_toast",
    "direct_message_key",
    "notification_key",
    "sanitize_content",
    "style_for",
]
