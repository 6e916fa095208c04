"""
Task Schemas
============

Pydantic schemas for personal and team task endpoints.
"""

from typing import Optional
import uuid

from pydantic import BaseModel, Field

from lifeos.models.task import DEFAULT_TASK_CATEGORY, TaskStatus


# =============================================================================
# Request Schemas
# =============================================================================

class TaskCreate(BaseModel):
    """Request schema for creating a task."""

    title: str = Field(min_length=1, max_length=200)
    category: str = Field(default=DEFAULT_TASK_CATEGORY, min_length=1, max_length=50)


class SharedTaskCreate(BaseModel):
    """Request schema for adding a task to a team."""

    title: str = Field(min_length=1, max_length=200)
    assigned_to: Optional[uuid.UUID] = None


# =============================================================================
# Response Schemas
# =============================================================================

class TaskApiResponse(BaseModel):
    """A task as returned by the API."""

    id: str
    user_id: str
    title: str
    category: str
    status: TaskStatus
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class TaskListResponse(BaseModel):
    success: bool = True
    data: list[TaskApiResponse]


class TaskResponse(BaseModel):
    success: bool = True
    data: TaskApiResponse
