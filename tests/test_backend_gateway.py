"""Tests for the repositories behind the backend gateway, on sqlite."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from ara_notify.domain.entities import AttachmentType, NotificationType
from ara_notify.infrastructure.backend import BackendGateway
from ara_notify.infrastructure.database import Base, SessionLocal, engine, initialize_database
from ara_notify.infrastructure.models import (
    DirectChatModel,
    DirectMessageAttachmentModel,
    NotificationModel,
    ProfileModel,
    TweetModel,
    TweetReplyModel,
)


@pytest.fixture(autouse=True)
def reset_database() -> None:
    """Ensure the test database starts from a clean state for each test."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def backend() -> BackendGateway:
    return BackendGateway(SessionLocal)


def _seed() -> None:
    with SessionLocal() as session:
        session.add_all(
            [
                ProfileModel(id="profile-me", user_id="user-me", nickname="Me", username="me"),
                ProfileModel(id="profile-sender", user_id="user-sender", nickname="Mina"),
                TweetModel(id="tweet-1", author_id="profile-me", content="<p>post</p>"),
                TweetReplyModel(id="reply-1", tweet_id="tweet-1", content="<p>reply</p>"),
                DirectChatModel(id="chat-1", user1_id="profile-me", user2_id="profile-sender"),
                DirectMessageAttachmentModel(id="a-1", message_id="m-1", type="image"),
                DirectMessageAttachmentModel(id="a-2", message_id="m-1", type="sticker"),
                NotificationModel(
                    id="n-1",
                    type="like",
                    sender_id="profile-sender",
                    receiver_id="profile-me",
                    tweet_id="tweet-1",
                    created_at=datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc),
                ),
                NotificationModel(
                    id="n-2",
                    type="reply",
                    sender_id="profile-gone",
                    receiver_id="profile-me",
                    tweet_id="tweet-1",
                    comment_id="reply-1",
                    created_at=datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc),
                ),
                NotificationModel(
                    id="n-3",
                    type="poke",
                    receiver_id="profile-me",
                    created_at=datetime(2024, 5, 1, 11, 0, tzinfo=timezone.utc),
                ),
                NotificationModel(id="n-4", type="follow", receiver_id="profile-other"),
            ]
        )
        session.commit()


@pytest.mark.anyio
async def test_list_notifications_orders_and_joins_senders(backend) -> None:
    _seed()

    records = await backend.list_notifications("profile-me")

    assert [record.id for record in records] == ["n-2", "n-1"]
    assert records[0].type is NotificationType.REPLY
    assert records[0].sender.nickname == "Unknown user"
    assert records[1].sender.nickname == "Mina"


@pytest.mark.anyio
async def test_mutations(backend) -> None:
    _seed()

    assert await backend.mark_notification_read("n-1") is True
    assert await backend.mark_notification_read("missing") is False
    assert await backend.delete_notification("n-2") is True
    assert await backend.delete_notifications_for("profile-me") == 2

    assert await backend.list_notifications("profile-me") == []
    assert [r.id for r in await backend.list_notifications("profile-other")] == ["n-4"]


@pytest.mark.anyio
async def test_profile_and_content_lookups(backend) -> None:
    _seed()

    assert await backend.fetch_profile_id("user-me") == "profile-me"
    assert await backend.fetch_profile_id("user-nobody") is None
    assert (await backend.fetch_profile("profile-sender")).nickname == "Mina"
    assert (await backend.fetch_profile_by_user_id("user-me")).handle == "me"
    assert await backend.reply_exists("reply-1") is True
    assert await backend.reply_exists("reply-2") is False
    assert await backend.fetch_tweet_content("tweet-1") == "<p>post</p>"
    assert await backend.fetch_reply_content("reply-1") == "<p>reply</p>"


@pytest.mark.anyio
async def test_chat_lookups(backend) -> None:
    _seed()

    participants = await backend.fetch_chat_participants("chat-1")
    assert participants.includes("profile-me")
    assert await backend.fetch_chat_participants("chat-2") is None
    assert await backend.fetch_attachment_types("m-1") == [AttachmentType.IMAGE, AttachmentType.FILE]
