"""Pydantic models for the change-feed webhook."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ChangeEventAck(BaseModel):
    """Acknowledgement returned to the backend for each change event."""

    accepted: bool = Field(..., description="Whether the event was relayed to subscribers")
    table: str | None = None
    delivered: int = Field(default=0, ge=0, description="Subscriptions that received the event")


__all__ = ["ChangeEventAck"]
