"""
Profile Service
===============

Public profile settings and the anonymous public page.

The public page is cached in Redis by username and dropped whenever the
owner saves new settings. Only aggregate statistics leave this module;
raw rows (and expense amounts in particular) never do.
"""

import logging
from datetime import date, timedelta
from typing import Optional
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from lifeos.core.errors import ConflictError, ErrorCodes, NotFoundError
from lifeos.models.expense import Expense
from lifeos.models.habit import Habit, HabitLog
from lifeos.models.profile import PublicProfile
from lifeos.models.task import Task
from lifeos.schemas.profile import ProfileSettingsUpdate
from lifeos.services.analytics import STREAK_WINDOW_DAYS, public_profile_stats
from lifeos.services.cache import CacheInvalidator, CacheKeys, CacheManager
from lifeos.utils.validators import validate_username

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


def is_unique_violation(error: IntegrityError) -> bool:
    """True when the driver reports a unique constraint violation."""
    orig = error.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    return code == UNIQUE_VIOLATION


class ProfileService:
    """Service for public profile operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_settings(self, user_id: uuid.UUID) -> Optional[PublicProfile]:
        result = await self.db.execute(
            select(PublicProfile).where(PublicProfile.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def save_settings(self, user_id: uuid.UUID, data: ProfileSettingsUpdate) -> PublicProfile:
        """
        Create or update the caller's profile.

        Raises:
            ValidationError: invalid username (field ``username``)
            ConflictError: username already taken (field ``username``)
        """
        username = validate_username(data.username, data.is_public)

        profile = await self.get_settings(user_id)
        previous_username = profile.username if profile else None

        if profile is None:
            profile = PublicProfile(user_id=user_id)
            self.db.add(profile)

        profile.username = username
        profile.display_name = (data.display_name or "").strip() or None
        profile.bio = (data.bio or "").strip() or None
        profile.is_public = data.is_public
        profile.show_task_stats = data.show_task_stats
        profile.show_habit_streaks = data.show_habit_streaks
        profile.show_expense_summary = data.show_expense_summary

        try:
            async with self.db.begin_nested():
                await self.db.flush()
        except IntegrityError as e:
            if is_unique_violation(e):
                raise ConflictError(
                    code=ErrorCodes.PROFILE_USERNAME_TAKEN,
                    message="This username is already taken",
                    field="username",
                )
            raise

        await self.db.refresh(profile)
        # Drop cached pages only once the new settings are visible to readers
        await self.db.commit()
        await CacheInvalidator.on_profile_update(previous_username, profile.username)

        logger.info("Profile settings saved for user %s", user_id)
        return profile

    async def public_view(self, username: str, today: date) -> dict:
        """
        Public page for ``username``; only profiles marked public are visible.

        Raises:
            NotFoundError: unknown username or private profile
        """
        username = username.strip().lower()
        cache_key = CacheKeys.public_profile(username)

        cached = await CacheManager.get(cache_key)
        if cached is not None:
            return cached

        result = await self.db.execute(
            select(PublicProfile).where(
                PublicProfile.username == username,
                PublicProfile.is_public.is_(True),
            )
        )
        profile = result.scalar_one_or_none()
        if profile is None:
            raise NotFoundError(code=ErrorCodes.PROFILE_NOT_FOUND, message="Profile not found")

        tasks: list = []
        habits: list = []
        habit_logs: list = []
        expenses: list = []
        owner = profile.user_id

        if profile.show_task_stats:
            rows = await self.db.execute(select(Task.status).where(Task.user_id == owner))
            tasks = rows.mappings().all()

        if profile.show_habit_streaks:
            rows = await self.db.execute(
                select(Habit.id, Habit.name, Habit.color)
                .where(Habit.user_id == owner, Habit.archived.is_(False))
                .order_by(Habit.created_at.asc())
            )
            habits = rows.mappings().all()
            rows = await self.db.execute(
                select(HabitLog.habit_id, HabitLog.completed_at).where(
                    HabitLog.user_id == owner,
                    HabitLog.completed_at >= today - timedelta(days=STREAK_WINDOW_DAYS),
                )
            )
            habit_logs = rows.mappings().all()

        if profile.show_expense_summary:
            rows = await self.db.execute(
                select(Expense.category, Expense.created_at)
                .where(Expense.user_id == owner)
                .order_by(Expense.created_at.desc())
            )
            expenses = rows.mappings().all()

        view = {
            "username": profile.username,
            "display_name": profile.display_name,
            "bio": profile.bio,
            **public_profile_stats(profile, tasks, habits, habit_logs, expenses, today),
        }

        await CacheManager.set(cache_key, view, ttl=CacheManager.TTL_SHORT)
        return view
