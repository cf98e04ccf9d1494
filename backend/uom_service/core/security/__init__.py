"""Security modules for authentication."""

from uom_service.core.security.tokens import (
    TokenPayload,
    decode_token,
    verify_token,
)

__all__ = [
    "TokenPayload",
    "decode_token",
    "verify_token",
]
