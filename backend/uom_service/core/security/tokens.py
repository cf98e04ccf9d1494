"""
Bearer token verification for the UOM API.
Access tokens are HS256 JWTs issued by the admin service with a shared secret.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Annotated, Any

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt  # type: ignore[import-untyped]

from uom_service.core.config import get_settings
from uom_service.core.errors import AuthTokenError
from uom_service.core.logging import get_logger

logger = get_logger(__name__)
bearer_scheme = HTTPBearer(auto_error=False)

_ANONYMOUS_SUBJECT = "anonymous"


@dataclass(frozen=True)
class TokenPayload:
    """Validated access token claims."""

    sub: str
    email: str | None
    name: str | None
    type: str | None
    permissions: list[str]
    exp: datetime | None
    iat: datetime | None
    raw_claims: dict[str, Any]

    @property
    def is_anonymous(self) -> bool:
        return self.sub == _ANONYMOUS_SUBJECT


def _timestamp(value: Any) -> datetime | None:
    if value is None:
        return None
    return datetime.fromtimestamp(int(value), tz=UTC)


def decode_token(token: str) -> TokenPayload:
    """
    Decode and validate an access token.

    Checks the signature and expiry, and rejects refresh tokens so they
    cannot be replayed against the API.
    """
    settings = get_settings()
    if not settings.jwt_secret_key:
        logger.warning("token_verification_unconfigured")
        raise AuthTokenError("Invalid token", error_code="INVALID_TOKEN")

    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"verify_aud": False},
        )
    except ExpiredSignatureError as e:
        raise AuthTokenError("Token has expired", error_code="TOKEN_EXPIRED") from e
    except JWTError as e:
        logger.warning("token_verification_failed", error=str(e))
        raise AuthTokenError("Invalid token", error_code="INVALID_TOKEN") from e

    if claims.get("type") == "refresh":
        raise AuthTokenError("Refresh tokens cannot access the API", error_code="INVALID_TOKEN")

    subject = claims.get("id") or claims.get("sub")
    if not subject:
        raise AuthTokenError("Token missing subject", error_code="INVALID_TOKEN")

    permissions = claims.get("permissions") or []
    return TokenPayload(
        sub=str(subject),
        email=claims.get("email"),
        name=claims.get("name"),
        type=claims.get("type"),
        permissions=[str(item) for item in permissions] if isinstance(permissions, list) else [],
        exp=_timestamp(claims.get("exp")),
        iat=_timestamp(claims.get("iat")),
        raw_claims=claims,
    )


async def verify_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> TokenPayload:
    """
    Dependency that verifies the bearer token on protected routes.

    When authentication is disabled every request runs as an anonymous caller.
    """
    settings = get_settings()
    if not settings.auth_enabled:
        return TokenPayload(
            sub=_ANONYMOUS_SUBJECT,
            email=None,
            name=None,
            type=None,
            permissions=[],
            exp=None,
            iat=None,
            raw_claims={},
        )
    if credentials is None:
        raise AuthTokenError("Access token is required", error_code="MISSING_TOKEN")
    return decode_token(credentials.credentials)
