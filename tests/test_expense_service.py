"""
Expense Tests
=============

Tests for recording expenses from raw text amounts.
"""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, patch
import uuid

import pytest
from httpx import AsyncClient

from lifeos.core.errors import ValidationError
from lifeos.schemas.expense import ExpenseCreate
from lifeos.services.expense_service import ExpenseService
from tests.conftest import USER_ID, make_session


async def _fill_server_defaults(obj):
    obj.id = obj.id or uuid.uuid4()
    obj.created_at = obj.created_at or datetime(2026, 10, 19, tzinfo=timezone.utc)


class TestCreateExpense:
    """Tests for ExpenseService.create_expense"""

    @pytest.mark.asyncio
    async def test_parses_text_amount(self):
        db = make_session()

        expense = await ExpenseService(db).create_expense(
            USER_ID,
            ExpenseCreate(amount=" 12.5 ", category=" Food ", note="   "),
        )

        assert expense.amount == Decimal("12.50")
        assert expense.category == "Food"
        assert expense.note is None
        db.add.assert_called_once_with(expense)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", ["0", "-3", "ten", "1e30"])
    async def test_rejects_bad_amounts(self, amount):
        db = make_session()

        with pytest.raises(ValidationError) as exc_info:
            await ExpenseService(db).create_expense(USER_ID, ExpenseCreate(amount=amount))

        assert exc_info.value.field == "amount"
        db.add.assert_not_called()


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------

class TestExpenseEndpoints:
    """Tests for /api/v1/expenses"""

    @pytest.mark.asyncio
    async def test_create_commits_before_dropping_analytics(self, client: AsyncClient, db_session):
        db_session.refresh.side_effect = _fill_server_defaults
        commits_seen = []

        async def record(user_id):
            commits_seen.append(db_session.commit.await_count)

        with patch(
            "lifeos.services.cache.CacheInvalidator.on_activity_change",
            AsyncMock(side_effect=record),
        ):
            response = await client.post("/api/v1/expenses", json={"amount": "12.50", "category": "Food"})

        assert response.status_code == 201
        assert response.json()["data"]["amount"] == 12.5
        assert commits_seen == [1]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", ["abc", "-4", "0", "1e30", "99999999999999"])
    async def test_invalid_amount_is_a_field_error(self, client: AsyncClient, db_session, amount):
        response = await client.post("/api/v1/expenses", json={"amount": amount, "category": "Food"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["field"] == "amount"
        db_session.add.assert_not_called()
        db_session.commit.assert_not_called()
