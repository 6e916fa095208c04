"""
Learning Goal Schemas
=====================

Pydantic schemas for learning goal endpoints.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class LearningGoalCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    target_date: Optional[date] = None


class LearningGoalProgress(BaseModel):
    """
    Progress update. Out-of-range values are clamped to 0..100 rather
    than rejected, and the status follows from the clamped value.
    """

    progress: int
