"""
Pydantic Schemas
================

Request/response schemas for API validation.
"""

from lifeos.schemas.common import (
    BaseResponse,
    DeleteResponse,
    ErrorResponse,
    RelayErrorResponse,
)

__all__ = [
    "BaseResponse",
    "DeleteResponse",
    "ErrorResponse",
    "RelayErrorResponse",
]
