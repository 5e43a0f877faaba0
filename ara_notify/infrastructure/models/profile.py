"""SQLAlchemy model for the backend ``profiles`` table."""

from sqlalchemy import Column, String, Text

from ara_notify.infrastructure.database import Base


class ProfileModel(Base):
    """Public profile attached to an authenticated account."""

    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), nullable=False, unique=True, index=True)
    nickname = Column(String(80), nullable=True)
    username = Column(String(80), nullable=True)
    avatar_url = Column(Text, nullable=True)
    bio = Column(Text, nullable=True)


__all__ = ["ProfileModel"]
