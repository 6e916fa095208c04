"""
Habit Models
============

SQLAlchemy models for habits and their daily completion logs.
"""

from datetime import date
from enum import Enum
from typing import Optional
import uuid

from sqlalchemy import (
    Boolean,
    Date,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lifeos.db.base import Base, CreatedAtMixin, IdMixin, TimestampMixin, UserOwnedMixin


class HabitColor(str, Enum):
    """Palette tokens understood by the client."""
    INDIGO = "indigo"
    EMERALD = "emerald"
    AMBER = "amber"
    ROSE = "rose"
    SKY = "sky"

    @classmethod
    def coerce(cls, value: Optional[str]) -> "HabitColor":
        """Map unknown or missing tokens to the default colour."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return DEFAULT_HABIT_COLOR


DEFAULT_HABIT_COLOR = HabitColor.INDIGO


class Habit(Base, IdMixin, UserOwnedMixin, TimestampMixin):
    """
    Habit model.

    Archived habits stay in the table but drop out of every active view.
    """

    __tablename__ = "habits"

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    color: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=DEFAULT_HABIT_COLOR.value,
    )
    frequency: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="daily",
    )
    archived: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    logs: Mapped[list["HabitLog"]] = relationship(
        "HabitLog",
        back_populates="habit",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_habit_user_archived", "user_id", "archived"),
    )

    def __repr__(self) -> str:
        return f"<Habit(id={self.id}, name={self.name})>"

    def to_api_dict(self) -> dict:
        return {
            "id": str(self.id),
            "name": self.name,
            "description": self.description,
            "color": HabitColor.coerce(self.color).value,
            "frequency": self.frequency,
            "archived": self.archived,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class HabitLog(Base, IdMixin, UserOwnedMixin, CreatedAtMixin):
    """
    One completion of a habit on a calendar day.

    Presence of a row means "done that day"; the unique constraint keeps at
    most one row per (habit, date).
    """

    __tablename__ = "habit_logs"

    habit_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("habits.id", ondelete="CASCADE"),
        nullable=False,
    )
    completed_at: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )

    habit: Mapped["Habit"] = relationship(
        "Habit",
        back_populates="logs",
    )

    __table_args__ = (
        UniqueConstraint("habit_id", "completed_at", name="uq_habit_log_day"),
        Index("idx_habit_log_user_day", "user_id", "completed_at"),
    )

    def __repr__(self) -> str:
        return f"<HabitLog(habit_id={self.habit_id}, completed_at={self.completed_at})>"

    def to_api_dict(self) -> dict:
        return {
            "habit_id": str(self.habit_id),
            "completed_at": self.completed_at.isoformat(),
        }
