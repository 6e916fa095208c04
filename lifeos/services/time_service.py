"""
Time Service
============

Business logic for the day planner (time blocks) and the focus timer log.
"""

from datetime import date, timedelta
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lifeos.core.errors import ErrorCodes, NotFoundError, ValidationError
from lifeos.models.time_block import BlockColor, FocusSession, TimeBlock
from lifeos.schemas.time_block import FocusSessionCreate, TimeBlockCreate
from lifeos.services.analytics import focus_summary
from lifeos.services.task_service import TaskService
from lifeos.utils.helpers import local_at, local_midnight, utc_now
from lifeos.utils.validators import validate_title

FOCUS_SESSION_LIMIT = 50


class TimeService:
    """Service for time blocks and focus sessions."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # =========================================================================
    # Time blocks
    # =========================================================================

    async def get_block(self, block_id: uuid.UUID, user_id: uuid.UUID) -> TimeBlock:
        result = await self.db.execute(
            select(TimeBlock).where(TimeBlock.id == block_id, TimeBlock.user_id == user_id)
        )
        block = result.scalar_one_or_none()
        if block is None:
            raise NotFoundError(code=ErrorCodes.TIME_BLOCK_NOT_FOUND, message="Time block not found")
        return block

    async def list_blocks(self, user_id: uuid.UUID, day: date) -> list[TimeBlock]:
        """Blocks starting on ``day`` (user's timezone), earliest first."""
        result = await self.db.execute(
            select(TimeBlock)
            .where(
                TimeBlock.user_id == user_id,
                TimeBlock.start_time >= local_midnight(day),
                TimeBlock.start_time < local_midnight(day + timedelta(days=1)),
            )
            .order_by(TimeBlock.start_time.asc())
        )
        return list(result.scalars().all())

    async def create_block(self, user_id: uuid.UUID, data: TimeBlockCreate) -> TimeBlock:
        start_time = local_at(data.day, data.start)
        end_time = local_at(data.day, data.end)
        if end_time <= start_time:
            raise ValidationError(message="End time must be after start time", field="end")
        if data.task_id is not None:
            await TaskService(self.db).get_task(data.task_id, user_id)

        block = TimeBlock(
            user_id=user_id,
            title=validate_title(data.title),
            start_time=start_time,
            end_time=end_time,
            category=data.category.strip(),
            color=BlockColor.coerce(data.color).value,
            task_id=data.task_id,
        )
        self.db.add(block)
        await self.db.flush()
        await self.db.refresh(block)
        return block

    async def delete_block(self, block_id: uuid.UUID, user_id: uuid.UUID) -> None:
        block = await self.get_block(block_id, user_id)
        await self.db.delete(block)
        await self.db.flush()

    # =========================================================================
    # Focus sessions
    # =========================================================================

    async def list_sessions(self, user_id: uuid.UUID, limit: int = FOCUS_SESSION_LIMIT) -> list[FocusSession]:
        result = await self.db.execute(
            select(FocusSession)
            .where(FocusSession.user_id == user_id)
            .order_by(FocusSession.started_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def log_session(self, user_id: uuid.UUID, data: FocusSessionCreate) -> FocusSession:
        """
        Record a finished timer run.

        Missing timestamps are filled in as a run that ended now and lasted
        ``duration_minutes``.
        """
        completed_at = data.completed_at or utc_now()
        started_at = data.started_at or completed_at - timedelta(minutes=data.duration_minutes)
        if data.task_id is not None:
            await TaskService(self.db).get_task(data.task_id, user_id)

        session = FocusSession(
            user_id=user_id,
            task_id=data.task_id,
            category=data.category.strip(),
            duration_minutes=data.duration_minutes,
            started_at=started_at,
            completed_at=completed_at,
        )
        self.db.add(session)
        await self.db.flush()
        await self.db.refresh(session)
        return session

    async def focus_stats(self, user_id: uuid.UUID, today: date) -> dict:
        """Stats over the same newest sessions the log lists."""
        return focus_summary(await self.list_sessions(user_id), today)
