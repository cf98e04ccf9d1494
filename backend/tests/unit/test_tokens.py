"""
Unit tests for bearer token verification.
"""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from uom_service.core.config import get_settings
from uom_service.core.errors import AuthTokenError
from uom_service.core.security.tokens import decode_token, verify_token


@pytest.fixture
def access_claims():
    """Claims as issued by the admin service for an access token."""
    return {
        "id": "admin-42",
        "email": "ops@example.com",
        "name": "Ops Admin",
        "type": "admin",
        "permissions": ["uom:read", "uom:write"],
        "exp": int((datetime.now(UTC) + timedelta(hours=1)).timestamp()),
        "iat": int(datetime.now(UTC).timestamp()),
    }


@pytest.fixture
def configured_secret(monkeypatch):
    monkeypatch.setenv("JWT_SECRET_KEY", "test-secret")
    monkeypatch.setenv("AUTH_ENABLED", "true")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_valid_token_is_decoded(configured_secret, sign_token, access_claims):
    payload = decode_token(sign_token(access_claims))

    assert payload.sub == "admin-42"
    assert payload.email == "ops@example.com"
    assert payload.permissions == ["uom:read", "uom:write"]
    assert payload.exp is not None and payload.exp > datetime.now(UTC)
    assert not payload.is_anonymous


def test_sub_claim_is_accepted_when_id_is_absent(configured_secret, sign_token, access_claims):
    access_claims.pop("id")
    access_claims["sub"] = "user-7"

    assert decode_token(sign_token(access_claims)).sub == "user-7"


def test_expired_token_is_rejected(configured_secret, sign_token, access_claims):
    access_claims["exp"] = int((datetime.now(UTC) - timedelta(minutes=5)).timestamp())

    with pytest.raises(AuthTokenError) as exc_info:
        decode_token(sign_token(access_claims))

    assert exc_info.value.error_code == "TOKEN_EXPIRED"
    assert exc_info.value.status_code == 401


def test_token_signed_with_other_secret_is_rejected(configured_secret, sign_token, access_claims):
    with pytest.raises(AuthTokenError) as exc_info:
        decode_token(sign_token(access_claims, secret="someone-else"))

    assert exc_info.value.error_code == "INVALID_TOKEN"


def test_garbage_token_is_rejected(configured_secret):
    with pytest.raises(AuthTokenError) as exc_info:
        decode_token("not.a.jwt")

    assert exc_info.value.error_code == "INVALID_TOKEN"


def test_refresh_token_is_rejected(configured_secret, sign_token, access_claims):
    access_claims["type"] = "refresh"

    with pytest.raises(AuthTokenError, match="Refresh tokens"):
        decode_token(sign_token(access_claims))


def test_token_without_subject_is_rejected(configured_secret, sign_token, access_claims):
    access_claims.pop("id")

    with pytest.raises(AuthTokenError, match="subject"):
        decode_token(sign_token(access_claims))


def test_missing_secret_rejects_every_token(monkeypatch, sign_token, access_claims):
    monkeypatch.setenv("JWT_SECRET_KEY", "")
    get_settings.cache_clear()

    with pytest.warns(UserWarning), pytest.raises(AuthTokenError):
        decode_token(sign_token(access_claims))


@pytest.mark.asyncio
async def test_verify_token_requires_credentials(configured_secret):
    with pytest.raises(AuthTokenError) as exc_info:
        await verify_token(None)

    assert exc_info.value.error_code == "MISSING_TOKEN"


@pytest.mark.asyncio
async def test_verify_token_decodes_bearer_credentials(
    configured_secret, sign_token, access_claims
):
    credentials = HTTPAuthorizationCredentials(
        scheme="Bearer", credentials=sign_token(access_claims)
    )

    payload = await verify_token(credentials)

    assert payload.sub == "admin-42"


@pytest.mark.asyncio
async def test_verify_token_is_anonymous_when_auth_disabled(monkeypatch):
    monkeypatch.setenv("AUTH_ENABLED", "false")
    get_settings.cache_clear()

    payload = await verify_token(None)

    assert payload.is_anonymous
    assert payload.permissions == []
