"""
Expenses API Endpoints
======================
"""

from typing import Optional
import uuid

from fastapi import APIRouter, Query, status

from lifeos.dependencies import CurrentUser, DBSession
from lifeos.models.expense import EXPENSE_CATEGORIES
from lifeos.schemas.common import BaseResponse, DeleteResponse
from lifeos.schemas.expense import ExpenseCreate, ExpenseListResponse, ExpenseResponse
from lifeos.services.cache import CacheInvalidator
from lifeos.services.expense_service import ExpenseService

router = APIRouter()


@router.get(
    "",
    response_model=ExpenseListResponse,
)
async def list_expenses(
    current_user: CurrentUser,
    db: DBSession,
    limit: Optional[int] = Query(default=None, ge=1, le=500),
):
    expenses = await ExpenseService(db).list_expenses(current_user.user_id, limit)
    return ExpenseListResponse(data=[e.to_api_dict() for e in expenses])


@router.get(
    "/categories",
    response_model=BaseResponse[list[str]],
)
async def list_categories(current_user: CurrentUser):
    """Preset categories offered by the expense form."""
    return BaseResponse(data=list(EXPENSE_CATEGORIES))


@router.post(
    "",
    response_model=ExpenseResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_expense(
    expense_data: ExpenseCreate,
    current_user: CurrentUser,
    db: DBSession,
):
    """
    Record an expense.

    `amount` may be the raw text from the form ("12.50"); anything that is
    not a finite number greater than zero is rejected with a 400.
    """
    expense = await ExpenseService(db).create_expense(current_user.user_id, expense_data)
    await db.commit()
    await CacheInvalidator.on_activity_change(str(current_user.user_id))
    return ExpenseResponse(data=expense.to_api_dict())


@router.delete(
    "/{expense_id}",
    response_model=DeleteResponse,
)
async def delete_expense(
    expense_id: uuid.UUID,
    current_user: CurrentUser,
    db: DBSession,
):
    await ExpenseService(db).delete_expense(expense_id, current_user.user_id)
    await db.commit()
    await CacheInvalidator.on_activity_change(str(current_user.user_id))
    return DeleteResponse(message="Expense deleted")
