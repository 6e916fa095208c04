"""
Expense Service
===============

Business logic for personal expenses.
"""

from typing import Optional
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lifeos.core.errors import ErrorCodes, NotFoundError
from lifeos.models.expense import Expense
from lifeos.schemas.expense import ExpenseCreate
from lifeos.utils.validators import parse_amount


class ExpenseService:
    """Service for expense operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_expenses(self, user_id: uuid.UUID, limit: Optional[int] = None) -> list[Expense]:
        stmt = (
            select(Expense)
            .where(Expense.user_id == user_id)
            .order_by(Expense.created_at.desc())
        )
        if limit:
            stmt = stmt.limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def create_expense(self, user_id: uuid.UUID, data: ExpenseCreate) -> Expense:
        expense = Expense(
            user_id=user_id,
            amount=parse_amount(data.amount),
            category=data.category.strip(),
            note=(data.note or "").strip() or None,
        )
        self.db.add(expense)
        await self.db.flush()
        await self.db.refresh(expense)
        return expense

    async def delete_expense(self, expense_id: uuid.UUID, user_id: uuid.UUID) -> None:
        result = await self.db.execute(
            select(Expense).where(Expense.id == expense_id, Expense.user_id == user_id)
        )
        expense = result.scalar_one_or_none()
        if expense is None:
            raise NotFoundError(code=ErrorCodes.EXPENSE_NOT_FOUND, message="Expense not found")
        await self.db.delete(expense)
        await self.db.flush()
