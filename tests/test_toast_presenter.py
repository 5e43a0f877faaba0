"""Tests for toast countdowns and their presenter."""

from __future__ import annotations

import asyncio

import pytest

from ara_notify.application.use_cases.notifications import countdown
from ara_notify.application.use_cases.notifications.outbox import ClientOutbox
from ara_notify.application.use_cases.notifications.presenter import (
    DismissReason,
    ToastPresenter,
)


def test_countdown_pause_and_resume_extends_deadline() -> None:
    state = countdown.start(0.0, 4.0)
    state = countdown.pause(state, 1.0)
    assert state == countdown.Paused(remaining=3.0)

    assert countdown.is_expired(state, 100.0) is False

    state = countdown.resume(state, 3.0)
    assert state == countdown.Running(deadline=6.0)
    assert countdown.is_expired(state, 5.999) is False
    assert countdown.is_expired(state, 6.0) is True


def test_countdown_transitions_are_idempotent() -> None:
    running = countdown.start(0.0, 4.0)
    paused = countdown.pause(running, 2.0)

    assert countdown.pause(paused, 3.0) is paused
    assert countdown.resume(running, 1.0) is running
    assert countdown.remaining(paused, 10.0) == 2.0


@pytest.mark.anyio
async def test_hovered_toast_is_dismissed_after_unpaused_lifetime(clock) -> None:
    outbox = ClientOutbox()
    presenter = ToastPresenter(outbox, duration=4.0, clock=clock)
    presenter.show("notif-1", {"id": "notif-1"}, notification_id="n-1")

    clock.advance(1.0)
    presenter.hover("notif-1")
    clock.advance(2.0)
    presenter.leave("notif-1")

    clock.advance(2.9)
    assert presenter.sweep() == []
    assert "notif-1" in presenter

    clock.advance(0.1)
    assert presenter.sweep() == ["notif-1"]
    messages = outbox.drain()
    assert messages[0] == {"type": "toast.show", "data": {"id": "notif-1"}}
    assert messages[-1] == {
        "type": "toast.dismiss",
        "data": {"id": "notif-1", "reason": DismissReason.EXPIRED.value},
    }
    presenter.close()


@pytest.mark.anyio
async def test_paused_toast_never_expires(clock) -> None:
    presenter = ToastPresenter(ClientOutbox(), duration=4.0, clock=clock)
    presenter.show("chat-1", {"id": "chat-1"})
    presenter.hover("chat-1")

    clock.advance(60.0)

    assert presenter.sweep() == []
    assert "chat-1" in presenter
    presenter.close()


@pytest.mark.anyio
async def test_toasts_have_independent_timers(clock) -> None:
    presenter = ToastPresenter(ClientOutbox(), duration=4.0, clock=clock)
    presenter.show("notif-1", {"id": "notif-1"})
    clock.advance(2.0)
    presenter.show("notif-2", {"id": "notif-2"})

    clock.advance(2.0)

    assert presenter.sweep() == ["notif-1"]
    assert "notif-2" in presenter
    presenter.close()


@pytest.mark.anyio
async def test_timer_dismisses_toast_on_the_event_loop() -> None:
    outbox = ClientOutbox()
    presenter = ToastPresenter(outbox, duration=0.05)
    presenter.show("notif-1", {"id": "notif-1"})

    await asyncio.sleep(0.2)

    assert "notif-1" not in presenter
    assert outbox.drain()[-1]["type"] == "toast.dismiss"


@pytest.mark.anyio
async def test_dismiss_for_notification_only_targets_its_toasts(clock) -> None:
    outbox = ClientOutbox()
    presenter = ToastPresenter(outbox, duration=4.0, clock=clock)
    presenter.show("notif-1", {"id": "notif-1"}, notification_id="n-1")
    presenter.show("notif-2", {"id": "notif-2"}, notification_id="n-2")

    assert presenter.dismiss_for_notification("n-1") == 1
    assert "notif-1" not in presenter
    assert "notif-2" in presenter
    assert outbox.drain()[-1]["data"] == {"id": "notif-1", "reason": "navigated"}

    presenter.close()
    assert outbox.drain() == []
