"""
Habit Schemas
=============

Pydantic schemas for habit endpoints.
"""

from typing import Optional

from pydantic import BaseModel, Field


class HabitCreate(BaseModel):
    """Request schema for creating a habit. Unknown colours fall back to indigo."""

    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    color: Optional[str] = None


class HabitWithStatus(BaseModel):
    """Active habit plus today's state, as shown on the habits page."""

    id: str
    name: str
    description: Optional[str] = None
    color: str
    frequency: str
    archived: bool
    created_at: Optional[str] = None
    completed_today: bool
    streak: int


class HabitListResponse(BaseModel):
    success: bool = True
    data: list[HabitWithStatus]


class HabitToggleResponse(BaseModel):
    success: bool = True
    data: dict
