"""Typed change events received from the hosted backend.

The backend posts one JSON envelope per row change. Rows are validated and
narrowed here, before any domain object is built.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator

from ara_notify.domain.entities import DirectMessage, NotificationRecord, NotificationType
from ara_notify.utils import ensure_app_timezone

NOTIFICATIONS_TABLE = "notifications"
DIRECT_MESSAGES_TABLE = "direct_messages"


class NotificationRow(BaseModel):
    """Row shape of the ``notifications`` table."""

    model_config = ConfigDict(extra="ignore")

    id: str
    type: NotificationType
    sender_id: str | None = None
    receiver_id: str
    content: str | None = None
    tweet_id: str | None = None
    comment_id: str | None = None
    is_read: bool = False
    created_at: datetime | None = None

    @model_validator(mode="after")
    def _comment_requires_post(self) -> "NotificationRow":
        if self.comment_id and not self.tweet_id:
            raise ValueError("comment_id requires tweet_id")
        return self

    def to_record(self) -> NotificationRecord:
        return NotificationRecord(
            id=self.id,
            type=self.type,
            sender_ref=self.sender_id,
            receiver_ref=self.receiver_id,
            content_snapshot=self.content,
            target_entity_ref=self.tweet_id,
            sub_target_entity_ref=self.comment_id,
            is_read=self.is_read,
            created_at=ensure_app_timezone(self.created_at),
        )


class DirectMessageRow(BaseModel):
    """Row shape of the ``direct_messages`` table."""

    model_config = ConfigDict(extra="ignore")

    id: str
    chat_id: str
    sender_id: str
    content: str | None = None
    created_at: datetime | None = None

    def to_message(self) -> DirectMessage:
        return DirectMessage(
            id=self.id,
            chat_id=self.chat_id,
            sender_id=self.sender_id,
            content=self.content,
            created_at=ensure_app_timezone(self.created_at),
        )


class NotificationInserted(BaseModel):
    """A new notification row."""

    type: Literal["INSERT"]
    table: Literal["notifications"]
    record: NotificationRow


class DirectMessageInserted(BaseModel):
    """A new direct message row."""

    type: Literal["INSERT"]
    table: Literal["direct_messages"]
    record: DirectMessageRow


ChangeEvent = Annotated[
    Union[NotificationInserted, DirectMessageInserted],
    Field(discriminator="table"),
]

_change_event_adapter: TypeAdapter[ChangeEvent] = TypeAdapter(ChangeEvent)

SUPPORTED_TABLES = frozenset({NOTIFICATIONS_TABLE, DIRECT_MESSAGES_TABLE})


def parse_change_event(payload: Any) -> NotificationInserted | DirectMessageInserted | None:
    """Return the typed event for ``payload`` or ``None`` when it is not relayed.

    Only inserts on the supported tables are relayed; other envelopes are
    acknowledged and dropped. Malformed rows raise ``pydantic.ValidationError``.
    """

    if not isinstance(payload, dict):
        raise ValueError("Change event payload must be a JSON object")
    if payload.get("type") != "INSERT" or payload.get("table") not in SUPPORTED_TABLES:
        return None
    return _change_event_adapter.validate_python(payload)


__all__ = [
    "ChangeEvent",
    "DIRECT_MESSAGES_TABLE",
    "DirectMessageInserted",
    "DirectMessageRow",
    "NOTIFICATIONS_TABLE",
    "NotificationInserted",
    "NotificationRow",
    "parse_change_event",
]
