"""
Security Module
===============

Verification of access tokens issued by the hosted (Supabase) auth service.

The API never issues tokens itself; it only validates the HS256 JWTs
signed with the project's JWT secret and extracts the caller identity.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional
import uuid

from jose import JWTError, jwt

from lifeos.config import settings

JWT_ALGORITHM = "HS256"


def decode_token(token: str) -> Optional[dict[str, Any]]:
    """
    Decode and validate a JWT token.

    Args:
        token: JWT token string

    Returns:
        Decoded payload if valid, None otherwise
    """
    try:
        payload = jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[JWT_ALGORITHM],
            audience=settings.SUPABASE_JWT_AUDIENCE,
        )
        return payload
    except JWTError:
        return None


def create_access_token(
    user_id: uuid.UUID,
    email: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Mint a token shaped like the ones the hosted auth service issues.

    Used by local tooling and tests; production tokens come from the
    auth service.
    """
    now = datetime.now(timezone.utc)
    to_encode = {
        "sub": str(user_id),
        "email": email,
        "aud": settings.SUPABASE_JWT_AUDIENCE,
        "role": "authenticated",
        "iat": now,
        "exp": now + (expires_delta or timedelta(hours=1)),
    }
    return jwt.encode(
        to_encode,
        settings.SUPABASE_JWT_SECRET,
        algorithm=JWT_ALGORITHM,
    )
