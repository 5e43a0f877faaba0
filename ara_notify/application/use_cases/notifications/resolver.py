"""Click handling for notifications whose content may have been deleted."""

from __future__ import annotations

import logging

from ara_notify.domain.entities import (
    ClickOutcome,
    Navigation,
    NotificationRecord,
    NotificationType,
    ResolutionState,
)
from ara_notify.infrastructure.backend import BackendGateway

from .outbox import ClientOutbox
from .presentation import MESSAGE_TEXTS
from .presenter import DismissReason, ToastPresenter
from .store import NotificationStore

logger = logging.getLogger(__name__)

DELETED_POST_KEY = "notification.deleted_post"
DELETED_COMMENT_KEY = "notification.deleted_comment"


class GhostContentResolver:
    """Decide where a click leads, checking referenced content lazily.

    Existence is only verified when the user interacts with a notification.
    When the check itself fails the comment is assumed to exist and the user
    is sent to it.
    """

    def __init__(
        self,
        gateway: BackendGateway,
        store: NotificationStore,
        presenter: ToastPresenter,
        outbox: ClientOutbox,
    ) -> None:
        self._gateway = gateway
        self._store = store
        self._presenter = presenter
        self._outbox = outbox

    async def resolve(self, notification_id: str) -> ClickOutcome:
        record = self._store.get(notification_id)
        if record is None:
            return ClickOutcome(state=ResolutionState.DISCARDED)

        if not record.is_system:
            self._store.mark_read(notification_id)

        if record.type is NotificationType.FOLLOW:
            return self._navigate(record, self._profile_navigation(record))

        if not record.target_entity_ref:
            self._presenter.dismiss_for_notification(record.id, DismissReason.CLOSED)
            self._inform(DELETED_POST_KEY)
            self._store.silent_delete(record.id)
            return ClickOutcome(
                state=ResolutionState.SILENT_DELETE, message_key=DELETED_POST_KEY
            )

        post = Navigation.to_post(record.target_entity_ref)

        if record.type is NotificationType.COMMENT and not record.sub_target_entity_ref:
            return self._navigate_then_delete(record, post)

        if record.sub_target_entity_ref:
            comment_id = record.sub_target_entity_ref
            epoch = self._store.epoch
            try:
                exists = await self._gateway.reply_exists(comment_id)
            except Exception:
                logger.warning(
                    "Existence check for comment %s failed; navigating optimistically",
                    comment_id,
                    exc_info=True,
                )
                exists = True

            if epoch != self._store.epoch or not self._store.contains(record.id):
                logger.debug("Notification %s changed while checking comment %s", record.id, comment_id)
                return ClickOutcome(state=ResolutionState.DISCARDED)

            if not exists:
                return self._navigate_then_delete(record, post)
            return self._navigate(
                record,
                Navigation.to_post(record.target_entity_ref, highlight_comment_id=comment_id),
            )

        return self._navigate(record, post)

    @staticmethod
    def _profile_navigation(record: NotificationRecord) -> Navigation | None:
        handle = record.sender.handle if record.sender else None
        return Navigation.to_profile(handle) if handle else None

    def _navigate(self, record: NotificationRecord, navigation: Navigation | None) -> ClickOutcome:
        if navigation is not None:
            self._presenter.dismiss_for_notification(record.id, DismissReason.NAVIGATED)
            self._outbox.push(
                "navigate",
                {"path": navigation.path, "highlight_comment_id": navigation.highlight_comment_id},
            )
        return ClickOutcome(state=ResolutionState.NAVIGATE, navigation=navigation)

    def _navigate_then_delete(self, record: NotificationRecord, post: Navigation) -> ClickOutcome:
        self._inform(DELETED_COMMENT_KEY)
        self._navigate(record, post)
        self._store.silent_delete(record.id)
        return ClickOutcome(
            state=ResolutionState.SILENT_DELETE,
            navigation=post,
            message_key=DELETED_COMMENT_KEY,
        )

    def _inform(self, key: str) -> None:
        self._outbox.notify("info", key, MESSAGE_TEXTS[key])


__all__ = ["DELETED_COMMENT_KEY", "DELETED_POST_KEY", "GhostContentResolver"]
