"""
Analytics Service
=================

Loads the rows behind the dashboard and the analytics page and feeds them
through the pure functions in ``lifeos.services.analytics`` and
``lifeos.services.insights``.

The analytics page payload is cached per user and day; task, habit and
expense writes drop it (see ``CacheInvalidator.on_activity_change``).
"""

import calendar
import logging
import random
from datetime import date, timedelta
from typing import Any, Optional
import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lifeos.models.expense import Expense
from lifeos.models.habit import Habit, HabitLog
from lifeos.models.learning import GoalStatus, LearningGoal
from lifeos.models.task import Task, TaskStatus
from lifeos.services.analytics import (
    MONTH_BUCKETS,
    STREAK_WINDOW_DAYS,
    category_breakdown,
    completion_rate,
    completed_on,
    daily_task_activity,
    habit_streaks,
    month_total,
    monthly_expense_totals,
    start_of_week,
    unique_habit_days,
    weekly_summary,
)
from lifeos.services.cache import CacheKeys, CacheManager
from lifeos.services.insights import (
    FOCUS_MESSAGES,
    STALE_TASK_DAYS,
    generate_insights,
    pick_insight,
    pick_message,
    smart_notifications,
)
from lifeos.utils.helpers import local_midnight

logger = logging.getLogger(__name__)

DASHBOARD_HABIT_LIMIT = 5
DASHBOARD_TASK_LIMIT = 3
DASHBOARD_GOAL_LIMIT = 3
STALE_TASK_LIMIT = 3
ACTIVITY_DAYS = 7


def one_month_before(day: date) -> date:
    """Same day last month, clamped to that month's length."""
    year, month = (day.year, day.month - 1) if day.month > 1 else (day.year - 1, 12)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


class AnalyticsService:
    """Dashboard and analytics page aggregates for one user."""

    def __init__(self, db: AsyncSession, rng: Optional[random.Random] = None):
        self.db = db
        self.rng = rng

    async def _all(self, stmt) -> list[Any]:
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def _expenses_between(self, user_id: uuid.UUID, start: date, end: Optional[date] = None) -> list[Expense]:
        stmt = select(Expense).where(
            Expense.user_id == user_id,
            Expense.created_at >= local_midnight(start),
        )
        if end is not None:
            stmt = stmt.where(Expense.created_at < local_midnight(end))
        return await self._all(stmt)

    async def _pending_count(self, user_id: uuid.UUID) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(Task)
            .where(Task.user_id == user_id, Task.status == TaskStatus.PENDING)
        )
        return result.scalar_one()

    # =========================================================================
    # Dashboard
    # =========================================================================

    async def weekly_summary(self, user_id: uuid.UUID, today: date) -> dict:
        week_start = start_of_week(today)
        since = local_midnight(week_start)

        tasks_created = await self._all(
            select(Task).where(Task.user_id == user_id, Task.created_at >= since)
        )
        completed = await self.db.execute(
            select(func.count())
            .select_from(Task)
            .where(
                Task.user_id == user_id,
                Task.status == TaskStatus.COMPLETED,
                Task.updated_at >= since,
            )
        )
        this_week = await self._expenses_between(user_id, week_start)
        last_week = await self._expenses_between(user_id, week_start - timedelta(days=7), week_start)

        return weekly_summary(tasks_created, completed.scalar_one(), this_week, last_week)

    async def smart_insight(self, user_id: uuid.UUID, today: date) -> dict:
        since = today - timedelta(days=STREAK_WINDOW_DAYS)

        tasks = await self._all(
            select(Task).where(Task.user_id == user_id, Task.created_at >= local_midnight(since))
        )
        expenses = await self._expenses_between(user_id, since)
        logs = await self._all(
            select(HabitLog).where(HabitLog.user_id == user_id, HabitLog.completed_at >= since)
        )

        return pick_insight(generate_insights(tasks, expenses, logs), self.rng).to_api_dict()

    async def notifications(self, user_id: uuid.UUID, today: date) -> list[dict]:
        old_pending = await self._all(
            select(Task)
            .where(
                Task.user_id == user_id,
                Task.status == TaskStatus.PENDING,
                Task.created_at < local_midnight(today - timedelta(days=STALE_TASK_DAYS)),
            )
            .limit(STALE_TASK_LIMIT)
        )
        this_week = await self._expenses_between(user_id, start_of_week(today))
        month = await self._expenses_between(user_id, one_month_before(today))
        pending_count = await self._pending_count(user_id)

        return [
            n.to_api_dict()
            for n in smart_notifications(old_pending, this_week, month, pending_count)
        ]

    async def habit_overview(self, user_id: uuid.UUID, today: date) -> list[dict]:
        """First five active habits with today's status and current streak."""
        habits = await self._all(
            select(Habit)
            .where(Habit.user_id == user_id, Habit.archived.is_(False))
            .order_by(Habit.created_at.asc())
            .limit(DASHBOARD_HABIT_LIMIT)
        )
        logs = await self._all(
            select(HabitLog).where(
                HabitLog.user_id == user_id,
                HabitLog.completed_at >= today - timedelta(days=STREAK_WINDOW_DAYS),
            )
        )
        streaks = habit_streaks(habits, logs, today)

        return [
            {
                "id": str(habit.id),
                "name": habit.name,
                "color": habit.color,
                "completed_today": completed_on(logs, habit.id, today),
                "streak": streaks.get(str(habit.id), 0),
            }
            for habit in habits
        ]

    async def dashboard(self, user_id: uuid.UUID, today: date) -> dict:
        pending = await self._all(
            select(Task)
            .where(Task.user_id == user_id, Task.status == TaskStatus.PENDING)
            .order_by(Task.created_at.desc())
            .limit(DASHBOARD_TASK_LIMIT)
        )
        goals = await self._all(
            select(LearningGoal)
            .where(LearningGoal.user_id == user_id, LearningGoal.status == GoalStatus.IN_PROGRESS)
            .order_by(LearningGoal.updated_at.desc())
            .limit(DASHBOARD_GOAL_LIMIT)
        )
        month_expenses = await self._expenses_between(user_id, today.replace(day=1))

        return {
            "focus_message": pick_message(FOCUS_MESSAGES, self.rng),
            "weekly_summary": await self.weekly_summary(user_id, today),
            "insight": await self.smart_insight(user_id, today),
            "notifications": await self.notifications(user_id, today),
            "habits": await self.habit_overview(user_id, today),
            "pending_tasks": [t.to_api_dict() for t in pending],
            "learning_goals": [g.to_api_dict() for g in goals],
            "monthly_expenses": month_total(month_expenses, today),
        }

    # =========================================================================
    # Analytics page
    # =========================================================================

    async def analytics_page(self, user_id: uuid.UUID, today: date) -> dict:
        """Charts and stat cards; cached for the rest of the day."""
        cache_key = CacheKeys.analytics(str(user_id), today.isoformat())
        cached = await CacheManager.get(cache_key)
        if cached is not None:
            return cached

        # Rolling seven days ending today
        window_start = today - timedelta(days=ACTIVITY_DAYS - 1)
        week_tasks = await self._all(
            select(Task).where(Task.user_id == user_id, Task.created_at >= local_midnight(window_start))
        )

        six_months_ago = today.replace(day=1)
        for _ in range(MONTH_BUCKETS - 1):
            six_months_ago = one_month_before(six_months_ago)
        expenses = await self._expenses_between(user_id, six_months_ago)

        logs = await self._all(
            select(HabitLog).where(
                HabitLog.user_id == user_id,
                HabitLog.completed_at >= today - timedelta(days=STREAK_WINDOW_DAYS),
            )
        )

        payload = {
            "daily_activity": daily_task_activity(week_tasks, today, days=ACTIVITY_DAYS),
            "monthly_expenses": monthly_expense_totals(expenses, today),
            "categories": category_breakdown(expenses, today),
            "stats": {
                "weekly_completion": completion_rate(week_tasks, empty_value=0),
                "monthly_expenses": month_total(expenses, today),
                "habit_streak": unique_habit_days(logs),
                "total_tasks": len(week_tasks),
            },
        }

        await CacheManager.set(cache_key, payload, ttl=CacheManager.TTL_MEDIUM)
        return payload
