"""
Habit Service
=============

Business logic for habits and daily completion logs.
"""

import logging
from datetime import date, timedelta
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from lifeos.core.errors import ErrorCodes, NotFoundError
from lifeos.models.habit import Habit, HabitColor, HabitLog
from lifeos.schemas.habit import HabitCreate
from lifeos.services.analytics import STREAK_WINDOW_DAYS, completed_on, habit_streaks
from lifeos.utils.validators import validate_title

logger = logging.getLogger(__name__)


class HabitService:
    """Service for habit operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_habit(self, habit_id: uuid.UUID, user_id: uuid.UUID) -> Habit:
        result = await self.db.execute(
            select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
        )
        habit = result.scalar_one_or_none()
        if habit is None:
            raise NotFoundError(code=ErrorCodes.HABIT_NOT_FOUND, message="Habit not found")
        return habit

    async def list_active(self, user_id: uuid.UUID) -> list[Habit]:
        result = await self.db.execute(
            select(Habit)
            .where(Habit.user_id == user_id, Habit.archived.is_(False))
            .order_by(Habit.created_at.asc())
        )
        return list(result.scalars().all())

    async def recent_logs(self, user_id: uuid.UUID, today: date) -> list[HabitLog]:
        """Logs inside the streak window (inclusive of the window start)."""
        since = today - timedelta(days=STREAK_WINDOW_DAYS)
        result = await self.db.execute(
            select(HabitLog).where(
                HabitLog.user_id == user_id,
                HabitLog.completed_at >= since,
            )
        )
        return list(result.scalars().all())

    async def list_with_status(self, user_id: uuid.UUID, today: date) -> list[dict]:
        """Active habits with today's completion flag and current streak."""
        habits = await self.list_active(user_id)
        logs = await self.recent_logs(user_id, today)
        streaks = habit_streaks(habits, logs, today)

        return [
            {
                **habit.to_api_dict(),
                "completed_today": completed_on(logs, habit.id, today),
                "streak": streaks.get(str(habit.id), 0),
            }
            for habit in habits
        ]

    async def create_habit(self, user_id: uuid.UUID, data: HabitCreate) -> Habit:
        habit = Habit(
            user_id=user_id,
            name=validate_title(data.name, field="name"),
            description=(data.description or "").strip() or None,
            color=HabitColor.coerce(data.color).value,
            frequency="daily",
            archived=False,
        )
        self.db.add(habit)
        await self.db.flush()
        await self.db.refresh(habit)
        return habit

    async def archive_habit(self, habit_id: uuid.UUID, user_id: uuid.UUID) -> Habit:
        habit = await self.get_habit(habit_id, user_id)
        habit.archived = True
        await self.db.flush()
        return habit

    async def delete_habit(self, habit_id: uuid.UUID, user_id: uuid.UUID) -> None:
        habit = await self.get_habit(habit_id, user_id)
        await self.db.delete(habit)
        await self.db.flush()

    async def toggle_day(self, habit_id: uuid.UUID, user_id: uuid.UUID, day: date) -> bool:
        """
        Mark ``day`` done, or undo it if it already was.

        Returns the new completion state.
        """
        await self.get_habit(habit_id, user_id)

        result = await self.db.execute(
            select(HabitLog).where(
                HabitLog.habit_id == habit_id,
                HabitLog.completed_at == day,
            )
        )
        existing = result.scalar_one_or_none()

        if existing is not None:
            await self.db.delete(existing)
            await self.db.flush()
            return False

        try:
            async with self.db.begin_nested():
                self.db.add(HabitLog(habit_id=habit_id, user_id=user_id, completed_at=day))
        except IntegrityError:
            # A concurrent toggle already inserted the row
            logger.info("Habit %s already logged for %s", habit_id, day)
        return True
