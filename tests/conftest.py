"""Shared fixtures: test settings, a fake clock and an in-memory backend."""

from __future__ import annotations

import os
import sys
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

TEST_DB_PATH = Path(tempfile.gettempdir()) / "ara_notify_test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["BACKEND_JWT_SECRET"] = "test-jwt-secret"
os.environ["WEBHOOK_SECRET"] = "test-webhook-secret"
os.environ["APP_TIMEZONE"] = "UTC"

from ara_notify.config import get_settings  # noqa: E402

get_settings.cache_clear()

from ara_notify.domain.entities import (  # noqa: E402
    ChatParticipants,
    NotificationRecord,
    NotificationType,
    SenderProfile,
)

BASE_TIME = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeGateway:
    """In-memory stand-in for :class:`BackendGateway` that records mutations."""

    def __init__(self) -> None:
        self.profile_ids: dict[str, str] = {}
        self.profiles: dict[str, SenderProfile] = {}
        self.profiles_by_user: dict[str, SenderProfile] = {}
        self.replies: set[str] = set()
        self.tweet_contents: dict[str, str] = {}
        self.reply_contents: dict[str, str] = {}
        self.chats: dict[str, ChatParticipants] = {}
        self.attachments: dict[str, list] = {}
        self.notifications: dict[str, list[NotificationRecord]] = {}
        self.failing: set[str] = set()
        self.read_calls: list[str] = []
        self.delete_calls: list[str] = []
        self.clear_calls: list[str] = []
        self.exists_calls: list[str] = []

    def _check(self, operation: str) -> None:
        if operation in self.failing:
            raise RuntimeError(f"{operation} unavailable")

    async def fetch_profile_id(self, user_id: str) -> str | None:
        self._check("fetch_profile_id")
        return self.profile_ids.get(user_id)

    async def fetch_profile(self, profile_id: str) -> SenderProfile | None:
        self._check("fetch_profile")
        return self.profiles.get(profile_id)

    async def fetch_profile_by_user_id(self, user_id: str) -> SenderProfile | None:
        self._check("fetch_profile_by_user_id")
        return self.profiles_by_user.get(user_id)

    async def reply_exists(self, reply_id: str) -> bool:
        self.exists_calls.append(reply_id)
        self._check("reply_exists")
        return reply_id in self.replies

    async def fetch_tweet_content(self, tweet_id: str) -> str | None:
        self._check("fetch_tweet_content")
        return self.tweet_contents.get(tweet_id)

    async def fetch_reply_content(self, reply_id: str) -> str | None:
        self._check("fetch_reply_content")
        return self.reply_contents.get(reply_id)

    async def fetch_chat_participants(self, chat_id: str) -> ChatParticipants | None:
        self._check("fetch_chat_participants")
        return self.chats.get(chat_id)

    async def fetch_attachment_types(self, message_id: str) -> list:
        self._check("fetch_attachment_types")
        return list(self.attachments.get(message_id, []))

    async def list_notifications(self, receiver_id: str) -> list[NotificationRecord]:
        self._check("list_notifications")
        return list(self.notifications.get(receiver_id, []))

    async def mark_notification_read(self, notification_id: str) -> bool:
        self.read_calls.append(notification_id)
        self._check("mark_notification_read")
        return True

    async def delete_notification(self, notification_id: str) -> bool:
        self.delete_calls.append(notification_id)
        self._check("delete_notification")
        return True

    async def delete_notifications_for(self, receiver_id: str) -> int:
        self.clear_calls.append(receiver_id)
        self._check("delete_notifications_for")
        return 0


def make_record(
    notification_id: str,
    notification_type: NotificationType = NotificationType.LIKE,
    *,
    minutes: int = 0,
    is_read: bool = False,
    sender_ref: str | None = "profile-sender",
    receiver_ref: str = "profile-me",
    target: str | None = "tweet-1",
    sub_target: str | None = None,
    content: str | None = None,
    sender: SenderProfile | None = None,
) -> NotificationRecord:
    return NotificationRecord(
        id=notification_id,
        type=notification_type,
        sender_ref=sender_ref,
        receiver_ref=receiver_ref,
        content_snapshot=content,
        target_entity_ref=target,
        sub_target_entity_ref=sub_target,
        is_read=is_read,
        created_at=BASE_TIME + timedelta(minutes=minutes),
        sender=sender,
    )


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()
