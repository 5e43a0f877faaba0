"""Change-feed plumbing between the hosted backend and client sessions."""

from .broker import ChangeCallback, ChangeFeedBroker, StreamFilter, SubscriptionHandle
from .events import (
    DIRECT_MESSAGES_TABLE,
    NOTIFICATIONS_TABLE,
    ChangeEvent,
    DirectMessageInserted,
    DirectMessageRow,
    NotificationInserted,
    NotificationRow,
    parse_change_event,
)

__all__ = [
    "ChangeCallback",
    "ChangeFeedBroker",
    "StreamFilter",
    "SubscriptionHandle",
    "DIRECT_MESSAGES_TABLE",
    "NOTIFICATIONS_TABLE",
    "ChangeEvent",
    "DirectMessageInserted",
    "DirectMessageRow",
    "NotificationInserted",
    "NotificationRow",
    "parse_change_event",
]
