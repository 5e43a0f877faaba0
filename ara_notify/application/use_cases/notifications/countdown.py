"""Pausable countdown used by toasts, as pure transition functions.

A countdown is either ``Running`` towards an absolute deadline or ``Paused``
with the time that was left when the pointer entered the toast. Times are
seconds on the caller's clock.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Running:
    deadline: float


@dataclass(frozen=True)
class Paused:
    remaining: float


Countdown = Union[Running, Paused]


def start(now: float, duration: float) -> Running:
    return Running(deadline=now + duration)


def pause(state: Countdown, now: float) -> Paused:
    if isinstance(state, Paused):
        return state
    return Paused(remaining=max(0.0, state.deadline - now))


def resume(state: Countdown, now: float) -> Running:
    if isinstance(state, Running):
        return state
    return Running(deadline=now + state.remaining)


def remaining(state: Countdown, now: float) -> float:
    if isinstance(state, Paused):
        return state.remaining
    return max(0.0, state.deadline - now)


def is_expired(state: Countdown, now: float) -> bool:
    """Paused countdowns never expire."""

    return isinstance(state, Running) and now >= state.deadline


__all__ = [
    "Countdown",
    "Paused",
    "Running",
    "is_expired",
    "pause",
    "remaining",
    "resume",
    "start",
]
