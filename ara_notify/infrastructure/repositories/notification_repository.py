"""Persistence helpers for notification records."""

from __future__ import annotations

from collections.abc import Sequence
import logging

from sqlalchemy.orm import Session

from ara_notify.domain.entities import (
    UNKNOWN_SENDER_NAME,
    NotificationRecord,
    NotificationType,
    SenderProfile,
)
from ara_notify.infrastructure.models import NotificationModel, ProfileModel
from ara_notify.utils import ensure_app_timezone

logger = logging.getLogger(__name__)


class NotificationRepository:
    """Provide point reads and mutations for :class:`NotificationRecord` rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_receiver(
        self,
        receiver_id: str,
        *,
        limit: int | None = None,
    ) -> Sequence[NotificationRecord]:
        """Return the receiver's notifications, newest first, with their senders."""

        query = (
            self.session.query(NotificationModel, ProfileModel)
            .outerjoin(ProfileModel, ProfileModel.id == NotificationModel.sender_id)
            .filter(NotificationModel.receiver_id == receiver_id)
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
        )
        if limit is not None:
            query = query.limit(limit)

        records: list[NotificationRecord] = []
        for model, profile in query.all():
            try:
                record = self._to_entity(model)
            except ValueError as exc:
                logger.warning("Skipping malformed notification %s: %s", model.id, exc)
                continue
            if profile is not None:
                record.sender = SenderProfile(
                    id=profile.id,
                    nickname=profile.nickname or UNKNOWN_SENDER_NAME,
                    username=profile.username,
                    avatar_url=profile.avatar_url,
                )
            elif record.sender_ref:
                record.sender = SenderProfile.unknown(record.sender_ref)
            records.append(record)
        return records

    def mark_as_read(self, notification_id: str) -> bool:
        updated = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id == notification_id)
            .update({NotificationModel.is_read: True}, synchronize_session=False)
        )
        self.session.commit()
        return bool(updated)

    def delete(self, notification_id: str) -> bool:
        deleted = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id == notification_id)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return bool(deleted)

    def delete_for_receiver(self, receiver_id: str) -> int:
        deleted = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.receiver_id == receiver_id)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted

    @staticmethod
    def _to_entity(model: NotificationModel) -> NotificationRecord:
        return NotificationRecord(
            id=model.id,
            type=NotificationType(model.type),
            sender_ref=model.sender_id,
            receiver_ref=model.receiver_id,
            content_snapshot=model.content,
            target_entity_ref=model.tweet_id,
            sub_target_entity_ref=model.comment_id,
            is_read=bool(model.is_read),
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["NotificationRepository"]
