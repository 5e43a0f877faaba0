"""Domain entities for direct messages relayed as chat toasts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class AttachmentType(str, Enum):
    """Kinds of files attached to a direct message."""

    IMAGE = "image"
    VIDEO = "video"
    FILE = "file"


@dataclass
class DirectMessage:
    """A message inserted into the ``direct_messages`` table."""

    id: str
    chat_id: str
    sender_id: str
    content: str | None = None
    created_at: datetime | None = None
    attachment_types: list[AttachmentType] = field(default_factory=list)


@dataclass
class ChatParticipants:
    """Profile identifiers of both members of a one-to-one chat."""

    chat_id: str
    user1_id: str | None
    user2_id: str | None

    def includes(self, profile_id: str | None) -> bool:
        return bool(profile_id) and profile_id in (self.user1_id, self.user2_id)


__all__ = ["AttachmentType", "ChatParticipants", "DirectMessage"]
