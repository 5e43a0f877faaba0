"""Tests for configuration loading and access token validation."""

from __future__ import annotations

import pytest
from jose import jwt
from pydantic import ValidationError

from ara_notify.config import Settings, get_settings
from ara_notify.infrastructure.security import decode_access_token, resolve_identity


def test_settings_defaults_come_from_environment() -> None:
    settings = get_settings()

    assert settings.database_url.startswith("sqlite:///")
    assert settings.backend_jwt_audience == "authenticated"
    assert settings.dedup_window_ms == 500
    assert settings.dedup_ttl_ms == 5000
    assert settings.toast_duration_ms == 4000


def test_dedup_window_cannot_exceed_ttl() -> None:
    with pytest.raises(ValidationError):
        Settings(
            database_url="sqlite://",
            backend_jwt_secret="secret",
            dedup_window_ms=6000,
            dedup_ttl_ms=5000,
        )


def test_valid_token_resolves_identity() -> None:
    token = jwt.encode(
        {"sub": "user-me", "aud": "authenticated"}, "test-jwt-secret", algorithm="HS256"
    )

    assert decode_access_token(token)["sub"] == "user-me"
    assert resolve_identity(token) == "user-me"


@pytest.mark.parametrize(
    "claims, secret",
    [
        ({"sub": "user-me", "aud": "service_role"}, "test-jwt-secret"),
        ({"sub": "user-me", "aud": "authenticated"}, "someone-else"),
        ({"aud": "authenticated"}, "test-jwt-secret"),
    ],
)
def test_invalid_tokens_are_rejected(claims, secret) -> None:
    token = jwt.encode(claims, secret, algorithm="HS256")

    with pytest.raises(ValueError):
        resolve_identity(token)
