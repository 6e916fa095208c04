"""
Wellness Service
================

Mood check-ins, reflections and the burnout advisory.

One mood row per user per day: a second check-in on the same day updates
the existing row (insert ... on conflict do update).
"""

import logging
import random
from datetime import date, timedelta
from typing import Optional
import uuid

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from lifeos.models.task import Task
from lifeos.models.wellness import MoodLog, Reflection
from lifeos.schemas.wellness import MoodCheckIn, ReflectionCreate
from lifeos.services.analytics import start_of_week, weekly_average
from lifeos.services.insights import REFLECTION_PROMPTS, detect_burnout, pick_message
from lifeos.utils.helpers import local_midnight, utc_now
from lifeos.utils.validators import validate_title

logger = logging.getLogger(__name__)

BURNOUT_WINDOW_DAYS = 30


class WellnessService:
    """Service for mood, reflection and burnout operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # =========================================================================
    # Mood
    # =========================================================================

    async def get_mood(self, user_id: uuid.UUID, day: date) -> Optional[MoodLog]:
        result = await self.db.execute(
            select(MoodLog).where(MoodLog.user_id == user_id, MoodLog.logged_at == day)
        )
        return result.scalar_one_or_none()

    async def save_mood(self, user_id: uuid.UUID, data: MoodCheckIn, day: date) -> MoodLog:
        """Create or update the check-in for ``day``."""
        note = (data.note or "").strip() or None
        stmt = pg_insert(MoodLog).values(
            id=uuid.uuid4(),
            user_id=user_id,
            logged_at=day,
            mood=data.mood,
            energy=data.energy,
            note=note,
        )
        stmt = stmt.on_conflict_do_update(
            constraint="uq_mood_user_day",
            set_={
                "mood": stmt.excluded.mood,
                "energy": stmt.excluded.energy,
                "note": stmt.excluded.note,
                "updated_at": utc_now(),
            },
        ).returning(MoodLog.id)

        result = await self.db.execute(stmt)
        mood_id = result.scalar_one()

        mood = await self.db.get(MoodLog, mood_id, populate_existing=True)
        return mood

    async def moods_since(self, user_id: uuid.UUID, since: date) -> list[MoodLog]:
        result = await self.db.execute(
            select(MoodLog)
            .where(MoodLog.user_id == user_id, MoodLog.logged_at >= since)
            .order_by(MoodLog.logged_at.asc())
        )
        return list(result.scalars().all())

    # =========================================================================
    # Reflections
    # =========================================================================

    async def reflections_since(self, user_id: uuid.UUID, since: date) -> list[Reflection]:
        result = await self.db.execute(
            select(Reflection)
            .where(Reflection.user_id == user_id, Reflection.logged_at >= since)
            .order_by(Reflection.logged_at.desc(), Reflection.created_at.desc())
        )
        return list(result.scalars().all())

    async def add_reflection(self, user_id: uuid.UUID, data: ReflectionCreate, day: date) -> Reflection:
        reflection = Reflection(
            user_id=user_id,
            content=validate_title(data.content, field="content"),
            prompt=(data.prompt or "").strip() or None,
            logged_at=day,
        )
        self.db.add(reflection)
        await self.db.flush()
        await self.db.refresh(reflection)
        return reflection

    # =========================================================================
    # Aggregates
    # =========================================================================

    async def week_overview(self, user_id: uuid.UUID, today: date) -> dict:
        """Today's check-in, this week's moods and reflections, weekly averages."""
        week_start = start_of_week(today)
        moods = await self.moods_since(user_id, week_start)
        reflections = await self.reflections_since(user_id, week_start)
        today_mood = next((m for m in moods if m.logged_at == today), None)

        return {
            "today": today_mood.to_api_dict() if today_mood else None,
            "week_start": week_start.isoformat(),
            "moods": [m.to_api_dict() for m in moods],
            "reflections": [r.to_api_dict() for r in reflections],
            "average_mood": weekly_average(moods, "mood"),
            "average_energy": weekly_average(moods, "energy"),
        }

    async def burnout_report(self, user_id: uuid.UUID, today: date) -> dict:
        """Burnout flags from the last 30 days of moods and newly created tasks."""
        since = today - timedelta(days=BURNOUT_WINDOW_DAYS)
        moods = await self.moods_since(user_id, since)

        result = await self.db.execute(
            select(Task.status).where(Task.user_id == user_id, Task.created_at >= local_midnight(since))
        )
        tasks = [{"status": status} for status in result.scalars().all()]

        return detect_burnout(moods, tasks)


def random_reflection_prompt(rng: Optional[random.Random] = None) -> str:
    return pick_message(REFLECTION_PROMPTS, rng)
