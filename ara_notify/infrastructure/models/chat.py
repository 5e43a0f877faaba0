"""SQLAlchemy models for direct chats and message attachments."""

from sqlalchemy import Column, String, Text

from ara_notify.infrastructure.database import Base


class DirectChatModel(Base):
    """One-to-one chat between two profiles."""

    __tablename__ = "direct_chats"

    id = Column(String(36), primary_key=True)
    user1_id = Column(String(36), nullable=True)
    user2_id = Column(String(36), nullable=True)


class DirectMessageAttachmentModel(Base):
    """File attached to a direct message."""

    __tablename__ = "direct_message_attachments"

    id = Column(String(36), primary_key=True)
    message_id = Column(String(36), nullable=False, index=True)
    type = Column(String(16), nullable=False)
    url = Column(Text, nullable=True)


__all__ = ["DirectChatModel", "DirectMessageAttachmentModel"]
