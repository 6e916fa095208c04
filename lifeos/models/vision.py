"""
Vision Models
=============

SQLAlchemy models for the long-term future vision and the life roadmap.
"""

from datetime import date
from enum import Enum
from typing import Any, Optional

from sqlalchemy import Date, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.orm import Mapped, mapped_column

from lifeos.db.base import Base, IdMixin, TimestampMixin, UserOwnedMixin

VISION_HORIZON_YEARS = 5
MAX_HORIZON_YEARS = 50


class RoadmapItemType(str, Enum):
    GOAL = "goal"
    MILESTONE = "milestone"
    ACHIEVEMENT = "achievement"


class RoadmapCategory(str, Enum):
    PERSONAL = "personal"
    CAREER = "career"
    HEALTH = "health"
    RELATIONSHIPS = "relationships"
    FINANCIAL = "financial"


class RoadmapStatus(str, Enum):
    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    ACHIEVED = "achieved"


class FutureVision(Base, IdMixin, UserOwnedMixin, TimestampMixin):
    """The user's picture of their life in ``target_year``. One per user."""

    __tablename__ = "future_vision"

    vision_text: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    values: Mapped[list[str]] = mapped_column(
        ARRAY(Text),
        nullable=False,
        default=list,
    )
    ideal_routines: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
    )
    target_year: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("user_id", name="uq_future_vision_user"),
    )

    def __repr__(self) -> str:
        return f"<FutureVision(user_id={self.user_id}, target_year={self.target_year})>"

    def to_api_dict(self) -> dict:
        return {
            "id": str(self.id),
            "vision_text": self.vision_text,
            "values": list(self.values or []),
            "ideal_routines": self.ideal_routines or {},
            "target_year": self.target_year,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class RoadmapItem(Base, IdMixin, UserOwnedMixin, TimestampMixin):
    """A dated goal, milestone or achievement on the life roadmap."""

    __tablename__ = "life_roadmap"

    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    target_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )
    item_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=RoadmapItemType.GOAL.value,
    )
    category: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=RoadmapCategory.PERSONAL.value,
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=RoadmapStatus.PLANNED.value,
    )

    __table_args__ = (
        Index("idx_roadmap_user_target", "user_id", "target_date"),
    )

    def __repr__(self) -> str:
        return f"<RoadmapItem(id={self.id}, status={self.status})>"

    def to_api_dict(self) -> dict:
        return {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "target_date": self.target_date.isoformat(),
            "item_type": self.item_type,
            "category": self.category,
            "status": self.status,
        }
