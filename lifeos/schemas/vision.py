"""
Vision Schemas
==============

Pydantic schemas for the future vision and roadmap endpoints.
"""

from datetime import date
from typing import Any, Optional, Union

from pydantic import BaseModel, Field

from lifeos.models.vision import RoadmapCategory, RoadmapItemType, RoadmapStatus


class VisionSave(BaseModel):
    """
    Create or replace the caller's vision.

    ``values`` may be a list or a comma separated string; blank entries are
    dropped. ``target_year`` defaults to five years from now.
    """

    vision_text: str = Field(min_length=1, max_length=4000)
    values: Union[list[str], str] = Field(default_factory=list)
    ideal_routines: dict[str, Any] = Field(default_factory=dict)
    target_year: Optional[int] = None


class RoadmapItemCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    target_date: date
    item_type: RoadmapItemType = RoadmapItemType.GOAL
    category: RoadmapCategory = RoadmapCategory.PERSONAL


class RoadmapStatusUpdate(BaseModel):
    status: RoadmapStatus
