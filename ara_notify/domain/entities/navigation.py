"""Outcomes produced when a user clicks a notification."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from urllib.parse import quote


class ResolutionState(str, Enum):
    """States of the click resolution state machine."""

    UNVERIFIED = "unverified"
    NAVIGATE = "navigate"
    SILENT_DELETE = "silent_delete"
    DISCARDED = "discarded"


@dataclass(frozen=True)
class Navigation:
    """Client-side route change requested by the gateway."""

    path: str
    highlight_comment_id: str | None = None

    @classmethod
    def to_profile(cls, handle: str) -> "Navigation":
        return cls(path=f"/profile/{quote(handle, safe='')}")

    @classmethod
    def to_post(cls, post_id: str, *, highlight_comment_id: str | None = None) -> "Navigation":
        return cls(path=f"/sns/{post_id}", highlight_comment_id=highlight_comment_id)


@dataclass(frozen=True)
class ClickOutcome:
    """Terminal state reached for one click.

    ``navigation`` and a silent delete are not exclusive: a deleted comment
    still sends the user to its post before the notification is removed.
    """

    state: ResolutionState
    navigation: Navigation | None = None
    message_key: str | None = None

    @property
    def deletes(self) -> bool:
        return self.state is ResolutionState.SILENT_DELETE


__all__ = ["ClickOutcome", "Navigation", "ResolutionState"]
