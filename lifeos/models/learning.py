"""
Learning Goal Models
====================

SQLAlchemy model for learning goals with derived completion status.
"""

from datetime import date
from enum import Enum
from typing import Optional

from sqlalchemy import CheckConstraint, Date, Enum as SQLEnum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from lifeos.db.base import Base, IdMixin, TimestampMixin, UserOwnedMixin


class GoalStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


def clamp_progress(progress: int) -> int:
    """Keep progress inside 0..100."""
    return min(100, max(0, int(progress)))


def status_for_progress(progress: int) -> GoalStatus:
    """Status is never set directly: progress >= 100 means completed."""
    if progress >= 100:
        return GoalStatus.COMPLETED
    return GoalStatus.IN_PROGRESS


class LearningGoal(Base, IdMixin, UserOwnedMixin, TimestampMixin):
    """Learning goal model."""

    __tablename__ = "learning_goals"

    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    progress: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )
    status: Mapped[GoalStatus] = mapped_column(
        SQLEnum(GoalStatus, name="goalstatus", create_constraint=True, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=GoalStatus.IN_PROGRESS,
    )
    target_date: Mapped[Optional[date]] = mapped_column(
        Date,
        nullable=True,
    )

    __table_args__ = (
        CheckConstraint("progress BETWEEN 0 AND 100", name="ck_goal_progress_range"),
    )

    def __repr__(self) -> str:
        return f"<LearningGoal(id={self.id}, progress={self.progress})>"

    def set_progress(self, progress: int) -> None:
        self.progress = clamp_progress(progress)
        self.status = status_for_progress(self.progress)

    def to_api_dict(self) -> dict:
        return {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "progress": self.progress,
            "status": GoalStatus(self.status).value,
            "target_date": self.target_date.isoformat() if self.target_date else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
