"""Validation of access tokens issued by the hosted backend."""

from jose import JWTError, jwt

from ara_notify.config import get_settings

ALGORITHM = "HS256"


def decode_access_token(token: str) -> dict:
    """Return the verified claims of ``token``.

    Tokens are signed by the backend's auth service with the shared JWT
    secret; ``sub`` carries the authenticated account id.
    """

    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.backend_jwt_secret,
            algorithms=[ALGORITHM],
            audience=settings.backend_jwt_audience,
        )
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc


def resolve_identity(token: str) -> str:
    """Return the account id carried by ``token``."""

    payload = decode_access_token(token)
    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise ValueError("Token has no subject")
    return subject


__all__ = ["ALGORITHM", "decode_access_token", "resolve_identity"]
