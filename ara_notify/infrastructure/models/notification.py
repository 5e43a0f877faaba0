"""SQLAlchemy model for the backend ``notifications`` table."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, String, Text

from ara_notify.infrastructure.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NotificationModel(Base):
    """Database representation for social notifications."""

    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True)
    type = Column(String(32), nullable=False)
    sender_id = Column(String(36), nullable=True, index=True)
    receiver_id = Column(String(36), nullable=False, index=True)
    content = Column(Text, nullable=True)
    tweet_id = Column(String(36), nullable=True)
    comment_id = Column(String(36), nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


__all__ = ["NotificationModel"]
