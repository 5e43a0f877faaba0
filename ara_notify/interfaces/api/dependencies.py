"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from ara_notify.infrastructure.backend import BackendGateway
from ara_notify.infrastructure.database import get_db
from ara_notify.infrastructure.notifications import NotificationSessionManager
from ara_notify.infrastructure.realtime import ChangeFeedBroker
from ara_notify.infrastructure.repositories import ProfileRepository
from ara_notify.infrastructure.security import resolve_identity

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/v1/token")


def get_current_identity(token: str = Depends(oauth2_scheme)) -> str:
    """Return the account id of the authenticated user."""

    try:
        return resolve_identity(token)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Credenciales inválidas",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc


def get_current_profile_id(
    identity: str = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> str:
    """Return the profile id linked to the authenticated account."""

    profile_id = ProfileRepository(db).get_id_by_user_id(identity)
    if profile_id is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Perfil no encontrado",
        )
    return profile_id


def get_broker(request: Request) -> ChangeFeedBroker:
    return request.app.state.broker


def get_gateway(request: Request) -> BackendGateway:
    return request.app.state.gateway


def get_session_manager(request: Request) -> NotificationSessionManager:
    return request.app.state.session_manager
