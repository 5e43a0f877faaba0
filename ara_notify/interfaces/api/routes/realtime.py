"""Webhook that receives row changes from the hosted backend."""

from __future__ import annotations

import hmac
import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Header, HTTPException, status
from pydantic import ValidationError

from ara_notify.config import get_settings
from ara_notify.infrastructure.realtime import ChangeFeedBroker, parse_change_event
from ara_notify.interfaces.api.dependencies import get_broker
from ara_notify.interfaces.api.schemas import ChangeEventAck

router = APIRouter(prefix="/realtime", tags=["realtime"])

logger = logging.getLogger(__name__)


def verify_webhook_secret(
    x_webhook_secret: str | None = Header(default=None),
) -> None:
    """Rechaza las peticiones que no traen el secreto compartido con el backend."""

    expected = get_settings().webhook_secret
    if expected is None:
        return
    if x_webhook_secret is None or not hmac.compare_digest(x_webhook_secret, expected):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No autorizado",
        )


@router.post(
    "/changes",
    response_model=ChangeEventAck,
    dependencies=[Depends(verify_webhook_secret)],
)
async def receive_change(
    payload: Any = Body(...),
    broker: ChangeFeedBroker = Depends(get_broker),
) -> ChangeEventAck:
    """Recibe un cambio de fila y lo reenvía a las sesiones suscritas."""

    try:
        event = parse_change_event(payload)
    except (ValidationError, ValueError) as exc:
        logger.warning("Rejected malformed change event: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Evento inválido",
        ) from exc

    if event is None:
        table = payload.get("table") if isinstance(payload, dict) else None
        return ChangeEventAck(accepted=False, table=table)

    delivered = await broker.publish(event)
    logger.debug("Relayed %s insert to %s subscriptions", event.table, delivered)
    return ChangeEventAck(accepted=True, table=event.table, delivered=delivered)
