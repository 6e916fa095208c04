"""
Common Dependencies
===================

Shared dependencies used across the application.

The caller identity is taken from the hosted auth service's access token
only; request bodies never carry a user id.
"""

import logging
from dataclasses import dataclass
from typing import Annotated, Optional
import uuid

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from lifeos.config import settings
from lifeos.core.errors import AuthenticationError, ErrorCodes, RelayAuthError
from lifeos.core.security import decode_token
from lifeos.db.session import get_db

logger = logging.getLogger(__name__)

# Database session dependency
DBSession = Annotated[AsyncSession, Depends(get_db)]

# Security scheme for JWT authentication
security = HTTPBearer(auto_error=False)

# Development test user ID (consistent UUID for testing)
DEV_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
DEV_USER_EMAIL = "dev@test.local"


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity extracted from a verified access token."""

    user_id: uuid.UUID
    email: Optional[str] = None


DEV_USER = AuthenticatedUser(user_id=DEV_USER_ID, email=DEV_USER_EMAIL)


# =============================================================================
# User resolution
# =============================================================================

def _resolve_user_from_token(
    credentials: Optional[HTTPAuthorizationCredentials],
) -> Optional[AuthenticatedUser]:
    """Decode the JWT and return the caller, or None if it is unusable."""
    if credentials is None:
        return None

    payload = decode_token(credentials.credentials)
    if payload is None:
        return None

    user_id_str = payload.get("sub")
    if not user_id_str:
        return None

    try:
        user_id = uuid.UUID(user_id_str)
    except ValueError:
        return None

    return AuthenticatedUser(user_id=user_id, email=payload.get("email"))


def _remember_user(request: Request, user: AuthenticatedUser) -> AuthenticatedUser:
    # Read back by the New Relic middleware as enduser.id
    request.state.user_id = user.user_id
    return user


async def get_current_user(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> AuthenticatedUser:
    """
    Get current authenticated user.

    Raises 401 if not authenticated or token is invalid.
    In development with DEV_AUTH_DISABLED=True, returns the dev user.
    """
    if settings.auth_disabled:
        return _remember_user(request, DEV_USER)

    if credentials is None:
        raise AuthenticationError(
            code=ErrorCodes.AUTH_NOT_AUTHENTICATED,
            message="Not authenticated",
        )

    user = _resolve_user_from_token(credentials)
    if user is None:
        raise AuthenticationError(
            code=ErrorCodes.AUTH_INVALID_TOKEN,
            message="Invalid or expired token",
        )

    return _remember_user(request, user)


async def get_relay_user(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> AuthenticatedUser:
    """
    Same as ``get_current_user`` but fails with the relay error shape
    (``{"error": "Unauthorized"}``) the chat client expects.
    """
    if settings.auth_disabled:
        return _remember_user(request, DEV_USER)

    user = _resolve_user_from_token(credentials)
    if user is None:
        raise RelayAuthError()

    return _remember_user(request, user)


# Type alias for authenticated user dependency
CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]
RelayUser = Annotated[AuthenticatedUser, Depends(get_relay_user)]
