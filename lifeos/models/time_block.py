"""
Time Models
===========

SQLAlchemy models for calendar time blocks and completed focus sessions.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
import uuid

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from lifeos.db.base import Base, CreatedAtMixin, IdMixin, UserOwnedMixin


class BlockColor(str, Enum):
    """Palette tokens for time blocks."""
    BLUE = "blue"
    GREEN = "green"
    PURPLE = "purple"
    ORANGE = "orange"
    PINK = "pink"
    CYAN = "cyan"

    @classmethod
    def coerce(cls, value: Optional[str]) -> "BlockColor":
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return DEFAULT_BLOCK_COLOR


DEFAULT_BLOCK_COLOR = BlockColor.BLUE

# Categories offered by the planner; free text is accepted too.
TIME_CATEGORY_PRESETS = ("Work", "Personal", "Health", "Learning", "Creative", "General")
DEFAULT_TIME_CATEGORY = "General"


class TimeBlock(Base, IdMixin, UserOwnedMixin, CreatedAtMixin):
    """A planned slot on the calendar, optionally tied to a task."""

    __tablename__ = "time_blocks"

    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    start_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    end_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    category: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=DEFAULT_TIME_CATEGORY,
    )
    color: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=DEFAULT_BLOCK_COLOR.value,
    )
    task_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("tasks.id", ondelete="SET NULL"),
        nullable=True,
    )

    __table_args__ = (
        CheckConstraint("end_time > start_time", name="ck_time_block_order"),
        Index("idx_time_block_user_start", "user_id", "start_time"),
    )

    def __repr__(self) -> str:
        return f"<TimeBlock(id={self.id}, title={self.title})>"

    def to_api_dict(self) -> dict:
        return {
            "id": str(self.id),
            "title": self.title,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "category": self.category,
            "color": BlockColor.coerce(self.color).value,
            "task_id": str(self.task_id) if self.task_id else None,
        }


class FocusSession(Base, IdMixin, UserOwnedMixin, CreatedAtMixin):
    """
    A finished focus timer run.

    Only completed runs are stored, so ``duration_minutes`` is at least 1.
    """

    __tablename__ = "focus_sessions"

    task_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("tasks.id", ondelete="SET NULL"),
        nullable=True,
    )
    category: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=DEFAULT_TIME_CATEGORY,
    )
    duration_minutes: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    __table_args__ = (
        CheckConstraint("duration_minutes >= 1", name="ck_focus_duration_positive"),
        Index("idx_focus_user_started", "user_id", "started_at"),
    )

    def __repr__(self) -> str:
        return f"<FocusSession(id={self.id}, minutes={self.duration_minutes})>"

    def to_api_dict(self) -> dict:
        return {
            "id": str(self.id),
            "task_id": str(self.task_id) if self.task_id else None,
            "category": self.category,
            "duration_minutes": self.duration_minutes,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }
