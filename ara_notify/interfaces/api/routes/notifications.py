"""Endpoints and websocket handler for realtime notifications."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session

from ara_notify.application.use_cases.notifications import NotificationSession
from ara_notify.config import get_settings
from ara_notify.domain.entities import NotificationCategory
from ara_notify.infrastructure.database import get_db
from ara_notify.infrastructure.notifications import WebSocketPublisher
from ara_notify.infrastructure.repositories import NotificationRepository
from ara_notify.infrastructure.security import resolve_identity
from ara_notify.interfaces.api.dependencies import get_current_profile_id
from ara_notify.interfaces.api.schemas import NotificationRead, UnreadCountsRead

router = APIRouter(prefix="/notifications", tags=["notifications"])

logger = logging.getLogger(__name__)


@router.get("/", response_model=list[NotificationRead])
def list_notifications(
    category: NotificationCategory | None = None,
    db: Session = Depends(get_db),
    profile_id: str = Depends(get_current_profile_id),
) -> list[NotificationRead]:
    """Devuelve las notificaciones del usuario autenticado, de la más reciente a la más antigua."""

    records = NotificationRepository(db).list_for_receiver(profile_id)
    if category is not None:
        records = [record for record in records if record.category is category]
    return [NotificationRead.from_record(record) for record in records]


@router.get("/unread-counts", response_model=UnreadCountsRead)
def unread_counts(
    db: Session = Depends(get_db),
    profile_id: str = Depends(get_current_profile_id),
) -> UnreadCountsRead:
    """Cuenta las notificaciones no leídas por pestaña."""

    by_category = {category.value: 0 for category in NotificationCategory}
    for record in NotificationRepository(db).list_for_receiver(profile_id):
        if not record.is_read:
            by_category[record.category.value] += 1
    return UnreadCountsRead(total=sum(by_category.values()), by_category=by_category)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that streams notifications to the authenticated user."""

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=1008)
        return

    try:
        identity = resolve_identity(token)
    except ValueError:
        await websocket.close(code=1008)
        return

    state = websocket.app.state
    try:
        session = NotificationSession(state.broker, state.gateway, get_settings())
    except Exception:  # pragma: no cover - misconfigured application state
        logger.exception("Could not create notification session for user %s", identity)
        await websocket.close(code=1011)
        return

    await websocket.accept()
    state.session_manager.connect(identity, session)
    publisher = WebSocketPublisher(session.outbox, websocket)
    publisher.start()
    try:
        await session.start(identity)
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                logger.debug("Ignoring malformed websocket frame from user %s", identity)
                continue

            if not isinstance(message, dict):
                continue
            await session.handle_client_message(message)
    except WebSocketDisconnect:
        pass
    finally:
        state.session_manager.disconnect(identity, session)
        await publisher.stop()
        await session.close()
