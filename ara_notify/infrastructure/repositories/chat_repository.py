"""Read access to direct chats and message attachments."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from ara_notify.domain.entities import AttachmentType, ChatParticipants
from ara_notify.infrastructure.models import DirectChatModel, DirectMessageAttachmentModel

logger = logging.getLogger(__name__)


class ChatRepository:
    """Resolve chat membership and attachment kinds for incoming messages."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_participants(self, chat_id: str) -> ChatParticipants | None:
        model = self.session.get(DirectChatModel, chat_id)
        if model is None:
            return None
        return ChatParticipants(
            chat_id=model.id,
            user1_id=model.user1_id,
            user2_id=model.user2_id,
        )

    def list_attachment_types(self, message_id: str) -> list[AttachmentType]:
        rows = (
            self.session.query(DirectMessageAttachmentModel.type)
            .filter(DirectMessageAttachmentModel.message_id == message_id)
            .order_by(DirectMessageAttachmentModel.id)
            .all()
        )
        types: list[AttachmentType] = []
        for (raw_type,) in rows:
            try:
                types.append(AttachmentType(raw_type))
            except ValueError:
                logger.debug("Unknown attachment type %r on message %s", raw_type, message_id)
                types.append(AttachmentType.FILE)
        return types


__all__ = ["ChatRepository"]
