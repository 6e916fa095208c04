"""
Decision Models
===============

SQLAlchemy model for decisions and their pros/cons analysis.
"""

from typing import Optional

from sqlalchemy import Index, String, Text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from lifeos.db.base import Base, IdMixin, TimestampMixin, UserOwnedMixin


class Decision(Base, IdMixin, UserOwnedMixin, TimestampMixin):
    """Decision with free-text pros and cons lists."""

    __tablename__ = "decisions"

    question: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    context: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    pros: Mapped[list[str]] = mapped_column(
        ARRAY(Text),
        nullable=False,
        default=list,
    )
    cons: Mapped[list[str]] = mapped_column(
        ARRAY(Text),
        nullable=False,
        default=list,
    )
    recommendation: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="pending",
    )

    __table_args__ = (
        Index("idx_decision_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Decision(id={self.id}, question={self.question[:30]})>"

    def to_api_dict(self) -> dict:
        return {
            "id": str(self.id),
            "question": self.question,
            "context": self.context,
            "pros": list(self.pros or []),
            "cons": list(self.cons or []),
            "recommendation": self.recommendation,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
