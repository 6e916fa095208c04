"""
Common Schemas
==============

Shared Pydantic schemas used across the application.
"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class BaseResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str
    message: str
    field: Optional[str] = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    success: bool = False
    error: ErrorDetail


class RelayErrorResponse(BaseModel):
    """Flat error body returned by the AI relay endpoints."""

    error: str
    code: Optional[str] = None


class DeleteResponse(BaseModel):
    """Response for any delete endpoint."""

    success: bool = True
    message: str = "Deleted successfully"
