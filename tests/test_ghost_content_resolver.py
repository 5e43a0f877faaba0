"""Tests for click resolution of notifications pointing at deleted content."""

from __future__ import annotations

import asyncio

import pytest

from ara_notify.application.use_cases.notifications.outbox import ClientOutbox
from ara_notify.application.use_cases.notifications.presenter import ToastPresenter
from ara_notify.application.use_cases.notifications.resolver import (
    DELETED_COMMENT_KEY,
    DELETED_POST_KEY,
    GhostContentResolver,
)
from ara_notify.application.use_cases.notifications.signals import SignalBus
from ara_notify.application.use_cases.notifications.store import NotificationStore
from ara_notify.domain.entities import (
    Navigation,
    NotificationType,
    ResolutionState,
    SenderProfile,
)

from conftest import make_record


@pytest.fixture
def outbox() -> ClientOutbox:
    return ClientOutbox()


@pytest.fixture
def store(gateway, outbox) -> NotificationStore:
    store = NotificationStore(gateway, SignalBus(), outbox)
    store.reset("profile-me")
    return store


@pytest.fixture
def presenter(outbox, clock):
    presenter = ToastPresenter(outbox, duration=4.0, clock=clock)
    yield presenter
    presenter.close()


@pytest.fixture
def resolver(gateway, store, presenter, outbox) -> GhostContentResolver:
    return GhostContentResolver(gateway, store, presenter, outbox)


def _navigations(outbox: ClientOutbox) -> list[dict]:
    return [message["data"] for message in outbox.drain() if message["type"] == "navigate"]


@pytest.mark.anyio
async def test_deleted_comment_navigates_to_post_and_deletes_once(
    resolver, store, gateway, outbox
) -> None:
    store.load([make_record("n-1", NotificationType.REPLY, sub_target="reply-gone")])

    outcome = await resolver.resolve("n-1")
    await store.wait_idle()

    assert outcome.state is ResolutionState.SILENT_DELETE
    assert outcome.navigation == Navigation(path="/sns/tweet-1")
    assert outcome.message_key == DELETED_COMMENT_KEY
    assert outcome.deletes is True
    assert gateway.delete_calls == ["n-1"]
    assert not store.contains("n-1")
    assert _navigations(outbox) == [{"path": "/sns/tweet-1", "highlight_comment_id": None}]


@pytest.mark.anyio
async def test_existing_comment_navigates_with_highlight(resolver, store, gateway, outbox) -> None:
    gateway.replies.add("reply-1")
    store.load([make_record("n-1", NotificationType.REPLY, sub_target="reply-1")])

    outcome = await resolver.resolve("n-1")
    await store.wait_idle()

    assert outcome.state is ResolutionState.NAVIGATE
    assert outcome.navigation == Navigation(path="/sns/tweet-1", highlight_comment_id="reply-1")
    assert outcome.deletes is False
    assert gateway.delete_calls == []
    assert gateway.read_calls == ["n-1"]
    assert _navigations(outbox) == [{"path": "/sns/tweet-1", "highlight_comment_id": "reply-1"}]


@pytest.mark.anyio
async def test_failed_existence_check_navigates_optimistically(resolver, store, gateway) -> None:
    gateway.failing.add("reply_exists")
    store.load([make_record("n-1", NotificationType.LIKE, sub_target="reply-1")])

    outcome = await resolver.resolve("n-1")
    await store.wait_idle()

    assert outcome.state is ResolutionState.NAVIGATE
    assert outcome.navigation.highlight_comment_id == "reply-1"
    assert gateway.delete_calls == []


@pytest.mark.anyio
async def test_result_is_discarded_when_store_changes_during_check(
    resolver, store, gateway, outbox
) -> None:
    store.load([make_record("n-1", NotificationType.REPLY, sub_target="reply-gone")])
    original = gateway.reply_exists

    async def slow_reply_exists(reply_id: str) -> bool:
        await asyncio.sleep(0)
        store.reset("profile-other")
        return await original(reply_id)

    gateway.reply_exists = slow_reply_exists
    outbox.drain()

    outcome = await resolver.resolve("n-1")
    await store.wait_idle()

    assert outcome.state is ResolutionState.DISCARDED
    assert gateway.delete_calls == []
    assert _navigations(outbox) == []


@pytest.mark.anyio
async def test_comment_without_reply_reference_is_treated_as_deleted(resolver, store, gateway) -> None:
    store.load([make_record("n-1", NotificationType.COMMENT)])

    outcome = await resolver.resolve("n-1")
    await store.wait_idle()

    assert outcome.state is ResolutionState.SILENT_DELETE
    assert outcome.navigation == Navigation(path="/sns/tweet-1")
    assert gateway.exists_calls == []
    assert gateway.delete_calls == ["n-1"]


@pytest.mark.anyio
async def test_missing_post_reference_deletes_without_navigation(resolver, store, gateway, outbox) -> None:
    store.load([make_record("n-1", NotificationType.REPOST, target=None)])
    outbox.drain()

    outcome = await resolver.resolve("n-1")
    await store.wait_idle()

    assert outcome.state is ResolutionState.SILENT_DELETE
    assert outcome.navigation is None
    assert outcome.message_key == DELETED_POST_KEY
    assert gateway.delete_calls == ["n-1"]
    assert _navigations(outbox) == []


@pytest.mark.anyio
async def test_missing_post_reference_dismisses_the_clicked_toast(
    resolver, store, presenter, outbox
) -> None:
    store.load([make_record("n-1", NotificationType.REPOST, target=None)])
    presenter.show("notif-n-1", {"id": "notif-n-1"}, notification_id="n-1")
    outbox.drain()

    await resolver.resolve("n-1")
    await store.wait_idle()

    assert "notif-n-1" not in presenter
    dismissals = [m["data"] for m in outbox.drain() if m["type"] == "toast.dismiss"]
    assert dismissals == [{"id": "notif-n-1", "reason": "closed"}]


@pytest.mark.anyio
async def test_follow_navigates_to_sender_profile(resolver, store, gateway) -> None:
    sender = SenderProfile(id="profile-sender", nickname="Jin", username="jin kim")
    store.load([make_record("n-1", NotificationType.FOLLOW, target=None, sender=sender)])

    outcome = await resolver.resolve("n-1")
    await store.wait_idle()

    assert outcome.state is ResolutionState.NAVIGATE
    assert outcome.navigation == Navigation(path="/profile/jin%20kim")
    assert gateway.delete_calls == []


@pytest.mark.anyio
async def test_system_notification_without_post_is_silently_deleted(
    resolver, store, gateway, presenter, outbox
) -> None:
    store.load([make_record("n-1", NotificationType.SYSTEM, sender_ref=None, target=None)])
    presenter.show("notif-n-1", {"id": "notif-n-1"}, notification_id="n-1")
    outbox.drain()

    outcome = await resolver.resolve("n-1")
    await store.wait_idle()

    assert outcome.state is ResolutionState.SILENT_DELETE
    assert outcome.message_key == DELETED_POST_KEY
    assert gateway.read_calls == []
    assert gateway.delete_calls == ["n-1"]
    assert "notif-n-1" not in presenter
    dismissals = [m["data"] for m in outbox.drain() if m["type"] == "toast.dismiss"]
    assert dismissals == [{"id": "notif-n-1", "reason": "closed"}]


@pytest.mark.anyio
async def test_system_notification_with_post_navigates_without_marking_read(
    resolver, store, gateway, outbox
) -> None:
    store.load([make_record("n-1", NotificationType.SYSTEM, sender_ref=None)])

    outcome = await resolver.resolve("n-1")
    await store.wait_idle()

    assert outcome.state is ResolutionState.NAVIGATE
    assert outcome.navigation == Navigation(path="/sns/tweet-1")
    assert gateway.read_calls == []
    assert gateway.delete_calls == []
    assert _navigations(outbox) == [{"path": "/sns/tweet-1", "highlight_comment_id": None}]


@pytest.mark.anyio
async def test_follow_from_unresolved_sender_does_not_navigate(resolver, store, outbox) -> None:
    store.load(
        [
            make_record(
                "n-1",
                NotificationType.FOLLOW,
                target=None,
                sender_ref="p-9",
                sender=SenderProfile.unknown("p-9"),
            )
        ]
    )
    outbox.drain()

    outcome = await resolver.resolve("n-1")
    await store.wait_idle()

    assert outcome.state is ResolutionState.NAVIGATE
    assert outcome.navigation is None
    assert _navigations(outbox) == []


@pytest.mark.anyio
async def test_click_dismisses_the_notification_toast(resolver, store, presenter) -> None:
    store.load([make_record("n-1", NotificationType.REPOST)])
    presenter.show("notif-n-1", {"id": "notif-n-1"}, notification_id="n-1")

    await resolver.resolve("n-1")
    await store.wait_idle()

    assert "notif-n-1" not in presenter


@pytest.mark.anyio
async def test_unknown_notification_is_discarded(resolver) -> None:
    outcome = await resolver.resolve("missing")

    assert outcome.state is ResolutionState.DISCARDED
