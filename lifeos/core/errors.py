"""
Error Handling
==============

Standardized error codes and exception handlers.

Two response shapes are produced:

- the API envelope ``{"success": false, "error": {"code", "message", ...}}``
  used by every CRUD endpoint, and
- the relay shape ``{"error": "<message>"}`` used by the AI relay endpoints
  (life coach, knowledge recall), which the chat client reads directly.
"""

import logging
from typing import Optional

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """Standardized error codes."""

    # Authentication (AUTH_001 - AUTH_010)
    AUTH_NOT_AUTHENTICATED = "AUTH_001"
    AUTH_INVALID_TOKEN = "AUTH_002"

    # Tasks
    TASK_NOT_FOUND = "TASK_001"

    # Habits
    HABIT_NOT_FOUND = "HABIT_001"

    # Expenses
    EXPENSE_NOT_FOUND = "EXPENSE_001"

    # Notes
    NOTE_NOT_FOUND = "NOTE_001"
    NOTE_LINK_NOT_FOUND = "NOTE_002"
    NOTE_LINK_EXISTS = "NOTE_003"

    # Decisions
    DECISION_NOT_FOUND = "DECISION_001"

    # Learning goals
    GOAL_NOT_FOUND = "GOAL_001"

    # Time blocks
    TIME_BLOCK_NOT_FOUND = "TIME_001"

    # Automation
    AUTOMATION_RULE_NOT_FOUND = "AUTOMATION_001"
    TEMPLATE_NOT_FOUND = "AUTOMATION_002"

    # Vision
    VISION_NOT_FOUND = "VISION_001"
    ROADMAP_ITEM_NOT_FOUND = "VISION_002"

    # Teams
    TEAM_NOT_FOUND = "TEAM_001"
    TEAM_INVALID_INVITE = "TEAM_002"
    TEAM_NOT_MEMBER = "TEAM_003"
    TEAM_ITEM_NOT_FOUND = "TEAM_004"

    # Profile
    PROFILE_NOT_FOUND = "PROFILE_001"
    PROFILE_USERNAME_TAKEN = "PROFILE_002"

    # AI relay
    AI_RATE_LIMITED = "AI_001"
    AI_CREDITS_EXHAUSTED = "AI_002"
    AI_UPSTREAM_ERROR = "AI_003"
    AI_NOT_CONFIGURED = "AI_004"

    # Rate Limit
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT"

    # General
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


# =============================================================================
# Custom Exceptions
# =============================================================================

class AppException(HTTPException):
    """Base application exception with structured error response."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        field: Optional[str] = None,
        **extra,
    ):
        self.code = code
        self.field = field
        self.extra = extra

        detail = {
            "code": code,
            "message": message,
        }

        if field:
            detail["field"] = field

        detail.update(extra)

        super().__init__(status_code=status_code, detail=detail)


class AuthenticationError(AppException):
    """Authentication-related errors."""

    def __init__(
        self,
        code: str = ErrorCodes.AUTH_NOT_AUTHENTICATED,
        message: str = "Not authenticated",
        **extra,
    ):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            code=code,
            message=message,
            **extra,
        )


class NotFoundError(AppException):
    """Resource not found errors."""

    def __init__(
        self,
        code: str = ErrorCodes.NOT_FOUND,
        message: str = "Resource not found",
        **extra,
    ):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            code=code,
            message=message,
            **extra,
        )


class ConflictError(AppException):
    """Resource conflict errors."""

    def __init__(
        self,
        code: str,
        message: str,
        **extra,
    ):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            code=code,
            message=message,
            **extra,
        )


class ForbiddenError(AppException):
    """Permission errors."""

    def __init__(
        self,
        code: str = ErrorCodes.TEAM_NOT_MEMBER,
        message: str = "Access denied",
        **extra,
    ):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            code=code,
            message=message,
            **extra,
        )


class ValidationError(AppException):
    """Validation errors."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        **extra,
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            code=ErrorCodes.VALIDATION_ERROR,
            message=message,
            field=field,
            **extra,
        )


class ServiceUnavailableError(AppException):
    """A backing service (database, cache) cannot be reached."""

    def __init__(
        self,
        message: str = "Service temporarily unavailable",
        **extra,
    ):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            code=ErrorCodes.SERVICE_UNAVAILABLE,
            message=message,
            **extra,
        )


# =============================================================================
# AI relay errors
# =============================================================================

class RelayError(Exception):
    """
    Error raised by the AI relay endpoints.

    Rendered as ``{"error": message}`` with ``status_code`` so the chat
    client can show ``message`` verbatim.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = ErrorCodes.AI_UPSTREAM_ERROR
    default_message: str = "Failed to get AI response"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class RelayAuthError(RelayError):
    """Missing or invalid bearer token on a relay endpoint."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = ErrorCodes.AUTH_INVALID_TOKEN
    default_message = "Unauthorized"


class UpstreamRateLimitError(RelayError):
    """The completion provider answered 429."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = ErrorCodes.AI_RATE_LIMITED
    default_message = "Rate limit exceeded. Please try again in a moment."


class UpstreamCreditsError(RelayError):
    """The completion provider answered 402."""

    status_code = status.HTTP_402_PAYMENT_REQUIRED
    code = ErrorCodes.AI_CREDITS_EXHAUSTED
    default_message = "AI credits depleted. Please add credits to continue."


class RelayRateLimitError(RelayError):
    """The caller exceeded the per-user relay budget."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = ErrorCodes.RATE_LIMIT_EXCEEDED
    default_message = "Too many requests. Please wait a moment before asking again."


class UpstreamError(RelayError):
    """Any other upstream failure (non-2xx, timeout, transport error)."""


class GatewayNotConfiguredError(RelayError):
    code = ErrorCodes.AI_NOT_CONFIGURED
    default_message = "AI gateway is not configured"


class VisionMissingError(RelayError):
    """Alignment check requested before any vision was saved."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = ErrorCodes.VISION_NOT_FOUND
    default_message = "Please define your future vision first"


# =============================================================================
# Exception Handlers
# =============================================================================

async def app_exception_handler(
    request: Request,
    exc: AppException,
) -> JSONResponse:
    """Handler for AppException."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
        },
        headers=getattr(exc, "headers", None),
    )


async def http_exception_handler(
    request: Request,
    exc: HTTPException,
) -> JSONResponse:
    """Handler for standard HTTPException."""
    # Check if detail is already structured
    if isinstance(exc.detail, dict) and "code" in exc.detail:
        error = exc.detail
    else:
        error = {
            "code": "HTTP_ERROR",
            "message": str(exc.detail),
        }

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": error,
        },
        headers=getattr(exc, "headers", None),
    )


async def relay_exception_handler(
    request: Request,
    exc: RelayError,
) -> JSONResponse:
    """Handler for RelayError: flat ``{"error": message}`` body."""
    if exc.status_code >= 500:
        logger.error("Relay error on %s: %s", request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "code": exc.code},
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handler for Pydantic validation errors."""
    from pydantic import ValidationError as PydanticValidationError
    from fastapi.exceptions import RequestValidationError

    if isinstance(exc, (PydanticValidationError, RequestValidationError)):
        errors = exc.errors()
        if errors:
            first_error = errors[0]
            field = ".".join(str(loc) for loc in first_error.get("loc", []))
            message = first_error.get("msg", "Validation error")
        else:
            field = None
            message = "Validation error"

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "success": False,
                "error": {
                    "code": ErrorCodes.VALIDATION_ERROR,
                    "message": message,
                    "field": field,
                },
            },
        )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "success": False,
            "error": {
                "code": ErrorCodes.VALIDATION_ERROR,
                "message": str(exc),
            },
        },
    )


async def global_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.exception("Unhandled error: %s: %s", type(exc).__name__, exc)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": {
                "code": ErrorCodes.INTERNAL_ERROR,
                "message": "An unexpected error occurred",
            },
        },
    )


def setup_exception_handlers(app):
    """
    Register exception handlers with FastAPI app.

    Usage:
        from lifeos.core.errors import setup_exception_handlers
        setup_exception_handlers(app)
    """
    from pydantic import ValidationError as PydanticValidationError
    from fastapi.exceptions import RequestValidationError

    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RelayError, relay_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(PydanticValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
