"""ORM models mirroring the hosted backend tables."""

from .chat import DirectChatModel, DirectMessageAttachmentModel
from .content import TweetModel, TweetReplyModel
from .notification import NotificationModel
from .profile import ProfileModel

__all__ = [
    "DirectChatModel",
    "DirectMessageAttachmentModel",
    "TweetModel",
    "TweetReplyModel",
    "NotificationModel",
    "ProfileModel",
]
