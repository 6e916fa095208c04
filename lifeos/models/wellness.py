"""
Wellness Models
===============

SQLAlchemy models for daily mood check-ins and reflection journal entries.
"""

from datetime import date
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    Date,
    Index,
    SmallInteger,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from lifeos.db.base import Base, CreatedAtMixin, IdMixin, TimestampMixin, UserOwnedMixin


class MoodLog(Base, IdMixin, UserOwnedMixin, TimestampMixin):
    """
    Daily mood and energy check-in.

    At most one row per user per date; saving twice on the same day
    updates the existing row.
    """

    __tablename__ = "mood_logs"

    logged_at: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )
    mood: Mapped[int] = mapped_column(
        SmallInteger,
        nullable=False,
    )
    energy: Mapped[int] = mapped_column(
        SmallInteger,
        nullable=False,
    )
    note: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    __table_args__ = (
        UniqueConstraint("user_id", "logged_at", name="uq_mood_user_day"),
        CheckConstraint("mood BETWEEN 1 AND 5", name="ck_mood_range"),
        CheckConstraint("energy BETWEEN 1 AND 5", name="ck_energy_range"),
    )

    def __repr__(self) -> str:
        return f"<MoodLog(user_id={self.user_id}, logged_at={self.logged_at})>"

    def to_api_dict(self) -> dict:
        return {
            "id": str(self.id),
            "logged_at": self.logged_at.isoformat(),
            "mood": self.mood,
            "energy": self.energy,
            "note": self.note,
        }


class Reflection(Base, IdMixin, UserOwnedMixin, CreatedAtMixin):
    """Append-only journal entry, optionally answering a prompt."""

    __tablename__ = "reflections"

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    prompt: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    logged_at: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )

    __table_args__ = (
        Index("idx_reflection_user_day", "user_id", "logged_at"),
    )

    def to_api_dict(self) -> dict:
        return {
            "id": str(self.id),
            "content": self.content,
            "prompt": self.prompt,
            "logged_at": self.logged_at.isoformat(),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
