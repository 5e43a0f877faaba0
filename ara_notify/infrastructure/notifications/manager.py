"""Connection management helpers for notification websockets."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING, DefaultDict, Set

if TYPE_CHECKING:
    from ara_notify.application.use_cases.notifications import NotificationSession

logger = logging.getLogger(__name__)


class NotificationSessionManager:
    """Track active client sessions grouped by authenticated user."""

    def __init__(self) -> None:
        self._sessions: DefaultDict[str, Set["NotificationSession"]] = defaultdict(set)

    def __len__(self) -> int:
        return sum(len(sessions) for sessions in self._sessions.values())

    def connect(self, user_id: str, session: "NotificationSession") -> None:
        """Register ``session`` for ``user_id``."""

        self._sessions[user_id].add(session)
        logger.info("Notification session opened for user %s", user_id)

    def disconnect(self, user_id: str, session: "NotificationSession") -> None:
        """Remove ``session`` from the pool for ``user_id``."""

        sessions = self._sessions.get(user_id)
        if sessions is None:
            return
        sessions.discard(session)
        if not sessions:
            self._sessions.pop(user_id, None)
        logger.info("Notification session closed for user %s", user_id)

    async def close_all(self) -> None:
        """Close every tracked session; used on application shutdown."""

        sessions = [
            (user_id, session)
            for user_id, user_sessions in self._sessions.items()
            for session in user_sessions
        ]
        for user_id, session in sessions:
            try:
                await session.close()
            except Exception:
                logger.exception("Failed to close notification session of user %s", user_id)
        self._sessions.clear()


__all__ = ["NotificationSessionManager"]
