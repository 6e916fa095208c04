"""
Expense Schemas
===============

Pydantic schemas for personal and team expense endpoints.
"""

from typing import Optional, Union

from pydantic import BaseModel, Field

from lifeos.models.expense import DEFAULT_EXPENSE_CATEGORY


class ExpenseCreate(BaseModel):
    """
    Request schema for creating an expense.

    ``amount`` is the raw text from the input box; it is parsed and
    rejected server-side unless it is a finite number > 0.
    """

    amount: Union[str, float]
    category: str = Field(default=DEFAULT_EXPENSE_CATEGORY, min_length=1, max_length=50)
    note: Optional[str] = Field(None, max_length=500)


class ExpenseApiResponse(BaseModel):
    id: str
    amount: float
    category: str
    note: Optional[str] = None
    created_at: Optional[str] = None


class ExpenseListResponse(BaseModel):
    success: bool = True
    data: list[ExpenseApiResponse]


class ExpenseResponse(BaseModel):
    success: bool = True
    data: ExpenseApiResponse
