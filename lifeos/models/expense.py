"""
Expense Models
==============

SQLAlchemy model for personal expenses.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from lifeos.db.base import Base, CreatedAtMixin, IdMixin, UserOwnedMixin


EXPENSE_CATEGORIES = (
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Bills & Utilities",
    "Health",
    "Travel",
    "Other",
)
DEFAULT_EXPENSE_CATEGORY = "Food & Dining"


class Expense(Base, IdMixin, UserOwnedMixin, CreatedAtMixin):
    """Expense model. Amounts are stored as NUMERIC(12, 2)."""

    __tablename__ = "expenses"

    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
    )
    category: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=DEFAULT_EXPENSE_CATEGORY,
    )
    note: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_expense_amount_non_negative"),
        Index("idx_expense_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Expense(id={self.id}, amount={self.amount}, category={self.category})>"

    def to_api_dict(self) -> dict:
        return {
            "id": str(self.id),
            "amount": float(self.amount),
            "category": self.category,
            "note": self.note,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
