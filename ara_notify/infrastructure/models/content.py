"""SQLAlchemy models for feed posts and their replies."""

from sqlalchemy import Column, String, Text

from ara_notify.infrastructure.database import Base


class TweetModel(Base):
    """A feed post that notifications may point at."""

    __tablename__ = "tweets"

    id = Column(String(36), primary_key=True)
    author_id = Column(String(36), nullable=True)
    content = Column(Text, nullable=True)


class TweetReplyModel(Base):
    """A comment inside a feed post."""

    __tablename__ = "tweet_replies"

    id = Column(String(36), primary_key=True)
    tweet_id = Column(String(36), nullable=False, index=True)
    author_id = Column(String(36), nullable=True)
    content = Column(Text, nullable=True)


__all__ = ["TweetModel", "TweetReplyModel"]
