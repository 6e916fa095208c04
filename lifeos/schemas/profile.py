"""
Profile Schemas
===============

Pydantic schemas for public profile settings and the public page.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ProfileSettingsUpdate(BaseModel):
    """
    Privacy settings form. The username is validated and lowercased
    server-side so the error can name the field.
    """

    username: Optional[str] = Field(None, max_length=50)
    display_name: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = Field(None, max_length=500)
    is_public: bool = False
    show_task_stats: bool = True
    show_habit_streaks: bool = True
    show_expense_summary: bool = False


class PublicTaskStats(BaseModel):
    completion_rate: int
    completed: int


class PublicHabit(BaseModel):
    name: str
    color: str
    completions: int


class PublicProfileView(BaseModel):
    """What an anonymous visitor sees. Never contains amounts."""

    username: str
    display_name: Optional[str] = None
    bio: Optional[str] = None
    task_stats: Optional[PublicTaskStats] = None
    habits: Optional[list[PublicHabit]] = None
    expense_categories: Optional[list[str]] = None
