"""
Habit Service Tests
===================

Tests for colour coercion, the daily toggle and the archive endpoint.
"""

from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, patch
import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import IntegrityError

from lifeos.core.errors import NotFoundError
from lifeos.models.habit import Habit, HabitColor, HabitLog
from lifeos.services.habit_service import HabitService
from tests.conftest import USER_ID, make_result, make_session

TODAY = date(2026, 10, 19)
HABIT_ID = uuid.UUID("33333333-3333-3333-3333-333333333333")


def _habit(**overrides) -> Habit:
    values = dict(
        id=HABIT_ID,
        user_id=USER_ID,
        name="Morning run",
        description=None,
        color="emerald",
        frequency="daily",
        archived=False,
        created_at=datetime(2026, 10, 1, tzinfo=timezone.utc),
    )
    values.update(overrides)
    return Habit(**values)


class TestHabitColor:
    """Tests for HabitColor.coerce"""

    @pytest.mark.parametrize("value", ["rose", " Rose ", "SKY"])
    def test_known_tokens(self, value):
        assert HabitColor.coerce(value).value == value.strip().lower()

    @pytest.mark.parametrize("value", [None, "", "magenta", "#ff0000"])
    def test_unknown_tokens_fall_back_to_indigo(self, value):
        assert HabitColor.coerce(value) is HabitColor.INDIGO


# ---------------------------------------------------------------------------
# Daily toggle
# ---------------------------------------------------------------------------

class TestToggleDay:
    """Tests for HabitService.toggle_day"""

    @pytest.mark.asyncio
    async def test_marks_day_done(self):
        db = make_session()
        db.execute.side_effect = [make_result(scalar=_habit()), make_result(scalar=None)]

        completed = await HabitService(db).toggle_day(HABIT_ID, USER_ID, TODAY)

        assert completed is True
        log = db.add.call_args.args[0]
        assert isinstance(log, HabitLog)
        assert (log.habit_id, log.user_id, log.completed_at) == (HABIT_ID, USER_ID, TODAY)

    @pytest.mark.asyncio
    async def test_second_toggle_undoes(self):
        db = make_session()
        existing = HabitLog(habit_id=HABIT_ID, user_id=USER_ID, completed_at=TODAY)
        db.execute.side_effect = [make_result(scalar=_habit()), make_result(scalar=existing)]

        completed = await HabitService(db).toggle_day(HABIT_ID, USER_ID, TODAY)

        assert completed is False
        db.delete.assert_awaited_once_with(existing)
        db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_concurrent_insert_still_reports_done(self):
        db = make_session()
        db.execute.side_effect = [make_result(scalar=_habit()), make_result(scalar=None)]
        db.begin_nested.return_value.__aexit__.side_effect = IntegrityError(
            "INSERT INTO habit_logs", {}, Exception("duplicate key")
        )

        completed = await HabitService(db).toggle_day(HABIT_ID, USER_ID, TODAY)

        assert completed is True

    @pytest.mark.asyncio
    async def test_unknown_habit(self):
        db = make_session()

        with pytest.raises(NotFoundError) as exc_info:
            await HabitService(db).toggle_day(HABIT_ID, USER_ID, TODAY)

        assert exc_info.value.code == "HABIT_001"


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

class TestHabitEndpoints:
    """Tests for /api/v1/habits"""

    @pytest.mark.asyncio
    async def test_archive_drops_analytics_after_commit(self, client: AsyncClient, db_session):
        db_session.execute.return_value = make_result(scalar=_habit())
        commits_seen = []

        async def record(user_id):
            commits_seen.append(db_session.commit.await_count)

        with patch(
            "lifeos.services.cache.CacheInvalidator.on_activity_change",
            AsyncMock(side_effect=record),
        ):
            response = await client.patch(f"/api/v1/habits/{HABIT_ID}/archive")

        assert response.status_code == 200
        assert response.json()["data"]["archived"] is True
        assert commits_seen == [1]
