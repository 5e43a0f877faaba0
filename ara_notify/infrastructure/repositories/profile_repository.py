"""Read access to public profiles."""

from __future__ import annotations

from sqlalchemy.orm import Session

from ara_notify.domain.entities import UNKNOWN_SENDER_NAME, SenderProfile
from ara_notify.infrastructure.models import ProfileModel


class ProfileRepository:
    """Resolve profiles by profile id or by authenticated account id."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_id_by_user_id(self, user_id: str) -> str | None:
        row = (
            self.session.query(ProfileModel.id)
            .filter(ProfileModel.user_id == user_id)
            .first()
        )
        return row[0] if row else None

    def get(self, profile_id: str) -> SenderProfile | None:
        model = self.session.get(ProfileModel, profile_id)
        return self._to_entity(model) if model else None

    def get_by_user_id(self, user_id: str) -> SenderProfile | None:
        model = (
            self.session.query(ProfileModel)
            .filter(ProfileModel.user_id == user_id)
            .first()
        )
        return self._to_entity(model) if model else None

    @staticmethod
    def _to_entity(model: ProfileModel) -> SenderProfile:
        return SenderProfile(
            id=model.id,
            nickname=model.nickname or UNKNOWN_SENDER_NAME,
            username=model.username,
            avatar_url=model.avatar_url,
        )


__all__ = ["ProfileRepository"]
