"""
Time Schemas
============

Pydantic schemas for time blocks and focus sessions.
"""

from datetime import date, datetime, time
from typing import Optional
import uuid

from pydantic import BaseModel, Field

from lifeos.models.time_block import DEFAULT_BLOCK_COLOR, DEFAULT_TIME_CATEGORY

MAX_FOCUS_MINUTES = 120


class TimeBlockCreate(BaseModel):
    """
    A block on one calendar day.

    ``start`` and ``end`` are wall-clock times (``HH:MM``) in the user's
    timezone; ``end`` must come after ``start``.
    """

    title: str = Field(min_length=1, max_length=200)
    day: date
    start: time
    end: time
    category: str = Field(default=DEFAULT_TIME_CATEGORY, min_length=1, max_length=50)
    color: Optional[str] = DEFAULT_BLOCK_COLOR.value
    task_id: Optional[uuid.UUID] = None


class FocusSessionCreate(BaseModel):
    """A finished focus timer run."""

    duration_minutes: int = Field(ge=1, le=MAX_FOCUS_MINUTES)
    category: str = Field(default=DEFAULT_TIME_CATEGORY, min_length=1, max_length=50)
    task_id: Optional[uuid.UUID] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class FocusCategory(BaseModel):
    name: str
    minutes: int
    hours: float
    percent: int


class FocusStats(BaseModel):
    week_minutes: int
    week_hours: int
    sessions_today: int
    average_minutes: int
    category_count: int
    categories: list[FocusCategory]
