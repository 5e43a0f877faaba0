"""Per-user subscriptions to the notification and direct-message streams."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from ara_notify.domain.entities import NotificationRecord, NotificationType, SenderProfile
from ara_notify.infrastructure.backend import BackendGateway
from ara_notify.infrastructure.realtime import (
    DIRECT_MESSAGES_TABLE,
    NOTIFICATIONS_TABLE,
    ChangeFeedBroker,
    DirectMessageInserted,
    NotificationInserted,
    StreamFilter,
    SubscriptionHandle,
)

from .dedup import DedupCache, direct_message_key, notification_key
from .presentation import build_chat_toast, build_notification_toast
from .presenter import ToastPresenter
from .signals import CHAT_MESSAGE_RECEIVED, NOTIFICATION_RECEIVED, SignalBus
from .store import NotificationStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class NotificationListener:
    """Own the change-feed subscriptions of the signed-in user.

    ``start`` tears down whatever was open and subscribes again for the new
    identity once its profile id is known. Events published before the
    profile lookup completes are not replayed. Every continuation compares
    the generation it started with against the current one and drops its
    result when the identity changed in between.
    """

    def __init__(
        self,
        broker: ChangeFeedBroker,
        gateway: BackendGateway,
        dedup: DedupCache,
        store: NotificationStore,
        presenter: ToastPresenter,
        bus: SignalBus,
    ) -> None:
        self._broker = broker
        self._gateway = gateway
        self._dedup = dedup
        self._store = store
        self._presenter = presenter
        self._bus = bus
        self._handles: list[SubscriptionHandle] = []
        self._generation = 0
        self.identity: str | None = None
        self.profile_id: str | None = None

    @property
    def active(self) -> bool:
        return bool(self._handles)

    async def start(self, identity: str | None) -> None:
        self.stop()
        if not identity:
            return

        generation = self._generation
        self.identity = identity
        profile_id = await self._fetch_or(
            None, self._gateway.fetch_profile_id, identity, what=f"profile of user {identity}"
        )
        if generation != self._generation:
            logger.debug("Profile lookup for %s finished after identity changed", identity)
            return
        self.profile_id = profile_id

        try:
            if profile_id:
                self._handles.append(
                    self._broker.subscribe(
                        f"global-notif-{profile_id}",
                        StreamFilter.parse(NOTIFICATIONS_TABLE, f"receiver_id=eq.{profile_id}"),
                        self._on_notification,
                    )
                )
            else:
                logger.info("User %s has no profile; only chat messages will be relayed", identity)
            self._handles.append(
                self._broker.subscribe(
                    f"global-chat-{identity}",
                    StreamFilter(table=DIRECT_MESSAGES_TABLE),
                    self._on_direct_message,
                )
            )
        except Exception:
            logger.exception("Could not open subscriptions for user %s", identity)

    def stop(self) -> None:
        self._generation += 1
        for handle in self._handles:
            self._broker.unsubscribe(handle)
        self._handles.clear()
        self.identity = None
        self.profile_id = None

    async def _on_notification(self, event: NotificationInserted) -> None:
        generation = self._generation
        record = event.record.to_record()
        if not self._dedup.should_deliver(notification_key(record)):
            logger.debug("Suppressed duplicate notification %s", record.id)
            return

        sender = await self._resolve_sender(record)
        content = await self._resolve_content(record)
        if generation != self._generation:
            logger.debug("Dropping notification %s for a previous identity", record.id)
            return

        record.sender = sender
        record.content_snapshot = content
        if not self._store.insert(record):
            return
        self._bus.emit(NOTIFICATION_RECEIVED, record)
        toast_id = f"notif-{record.id}"
        self._presenter.show(
            toast_id, build_notification_toast(toast_id, record), notification_id=record.id
        )

    async def _on_direct_message(self, event: DirectMessageInserted) -> None:
        generation = self._generation
        message = event.record.to_message()
        if message.sender_id == self.identity:
            return
        if not self._dedup.should_deliver(direct_message_key(message, self.profile_id)):
            logger.debug("Suppressed duplicate direct message %s", message.id)
            return

        participants = await self._fetch_or(
            None,
            self._gateway.fetch_chat_participants,
            message.chat_id,
            what=f"participants of chat {message.chat_id}",
        )
        if generation != self._generation:
            return
        if participants is not None and not participants.includes(self.profile_id):
            return

        sender = await self._fetch_or(
            SenderProfile.unknown(),
            self._gateway.fetch_profile_by_user_id,
            message.sender_id,
            what=f"profile of user {message.sender_id}",
        )
        message.attachment_types = await self._fetch_or(
            [],
            self._gateway.fetch_attachment_types,
            message.id,
            what=f"attachments of message {message.id}",
        )
        if generation != self._generation:
            return

        self._bus.emit(CHAT_MESSAGE_RECEIVED, message)
        toast_id = f"chat-{message.id}"
        self._presenter.show(toast_id, build_chat_toast(toast_id, message, sender))

    async def _resolve_sender(self, record: NotificationRecord) -> SenderProfile | None:
        if not record.sender_ref:
            return None
        return await self._fetch_or(
            SenderProfile.unknown(record.sender_ref),
            self._gateway.fetch_profile,
            record.sender_ref,
            what=f"sender {record.sender_ref}",
        )

    async def _resolve_content(self, record: NotificationRecord) -> str | None:
        """Fill in the text of the liked or mentioned content when the row lacks it."""

        content = record.content_snapshot
        blank = not (content or "").strip()

        needs_post = record.target_entity_ref and (
            (record.type is NotificationType.LIKE and not record.sub_target_entity_ref)
            or (record.type is NotificationType.MENTION and blank)
        )
        if needs_post:
            return await self._fetch_or(
                content,
                self._gateway.fetch_tweet_content,
                record.target_entity_ref,
                what=f"content of post {record.target_entity_ref}",
            ) or content

        if record.type is NotificationType.REPLY and record.sub_target_entity_ref and blank:
            return await self._fetch_or(
                content,
                self._gateway.fetch_reply_content,
                record.sub_target_entity_ref,
                what=f"content of reply {record.sub_target_entity_ref}",
            ) or content

        return content

    @staticmethod
    async def _fetch_or(
        fallback: T,
        operation: Callable[[str], Awaitable[T | None]],
        argument: str,
        *,
        what: str,
    ) -> T:
        try:
            result = await operation(argument)
        except Exception:
            logger.warning("Could not fetch %s", what, exc_info=True)
            return fallback
        return fallback if result is None else result


__all__ = ["NotificationListener"]
