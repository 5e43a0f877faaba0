"""Realtime notification helpers for the infrastructure layer."""

from .manager import NotificationSessionManager
from .publisher import WebSocketPublisher, serialize_notification, serialize_sender

__all__ = [
    "NotificationSessionManager",
    "WebSocketPublisher",
    "serialize_notification",
    "serialize_sender",
]
