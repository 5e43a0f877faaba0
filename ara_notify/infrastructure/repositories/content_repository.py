"""Read access to feed posts and comments referenced by notifications."""

from __future__ import annotations

from sqlalchemy.orm import Session

from ara_notify.infrastructure.models import TweetModel, TweetReplyModel


class ContentRepository:
    """Existence checks and content lookups for posts and comments."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def reply_exists(self, reply_id: str) -> bool:
        row = (
            self.session.query(TweetReplyModel.id)
            .filter(TweetReplyModel.id == reply_id)
            .first()
        )
        return row is not None

    def get_tweet_content(self, tweet_id: str) -> str | None:
        row = (
            self.session.query(TweetModel.content)
            .filter(TweetModel.id == tweet_id)
            .first()
        )
        return row[0] if row else None

    def get_reply_content(self, reply_id: str) -> str | None:
        row = (
            self.session.query(TweetReplyModel.content)
            .filter(TweetReplyModel.id == reply_id)
            .first()
        )
        return row[0] if row else None


__all__ = ["ContentRepository"]
