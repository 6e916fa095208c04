"""
Wellness Schemas
================

Pydantic schemas for mood check-ins, reflections and the burnout report.
"""

from typing import Optional

from pydantic import BaseModel, Field


class MoodCheckIn(BaseModel):
    """Today's mood and energy, both on a 1-5 scale."""

    mood: int = Field(ge=1, le=5)
    energy: int = Field(ge=1, le=5)
    note: Optional[str] = Field(None, max_length=1000)


class ReflectionCreate(BaseModel):
    content: str = Field(min_length=1)
    prompt: Optional[str] = None


class BurnoutReport(BaseModel):
    """Advisory flags derived from recent moods and the pending task count."""

    at_risk: bool
    warnings: list[str]
    low_mood: bool = False
    low_energy: bool = False
    declining_mood: bool = False
    overloaded: bool = False
