"""
Public Profile Model
====================

One optional public page per user, with per-section visibility flags.
"""

from typing import Optional

from sqlalchemy import Boolean, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from lifeos.db.base import Base, IdMixin, TimestampMixin, UserOwnedMixin


class PublicProfile(Base, IdMixin, UserOwnedMixin, TimestampMixin):
    """
    Public profile settings.

    ``username`` uniqueness is enforced by the database; a violation
    surfaces as a field-level conflict on save.
    """

    __tablename__ = "public_profiles"

    username: Mapped[Optional[str]] = mapped_column(
        String(50),
        unique=True,
        nullable=True,
    )
    display_name: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )
    bio: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    is_public: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )
    show_task_stats: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )
    show_habit_streaks: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )
    show_expense_summary: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    __table_args__ = (
        UniqueConstraint("user_id", name="uq_public_profile_user"),
    )

    def __repr__(self) -> str:
        return f"<PublicProfile(user_id={self.user_id}, username={self.username})>"

    def to_api_dict(self) -> dict:
        return {
            "id": str(self.id),
            "username": self.username,
            "display_name": self.display_name,
            "bio": self.bio,
            "is_public": self.is_public,
            "show_task_stats": self.show_task_stats,
            "show_habit_streaks": self.show_habit_streaks,
            "show_expense_summary": self.show_expense_summary,
        }
