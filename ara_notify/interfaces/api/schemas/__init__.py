from .notification import NotificationRead, SenderRead, UnreadCountsRead
from .realtime import ChangeEventAck

__all__ = ["ChangeEventAck", "NotificationRead", "SenderRead", "UnreadCountsRead"]
