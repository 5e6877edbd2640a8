"""JWT token verification. Tokens are issued by the storefront auth service."""

from datetime import datetime, timedelta, timezone
from uuid import UUID

from jose import jwt

from app.core.config import settings

DEFAULT_TOKEN_TTL = timedelta(hours=8)


def create_access_token(
    user_id: UUID,
    role: str,
    permissions: list[str],
    email: str = "",
    expires_delta: timedelta | None = None,
) -> str:
    """Issue a token with the same claims the auth service signs. Used by tools and tests."""
    expire = datetime.now(timezone.utc) + (expires_delta or DEFAULT_TOKEN_TTL)
    payload = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "permissions": permissions,
        "exp": expire,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Decode and validate JWT. Raises JWTError on failure."""
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
