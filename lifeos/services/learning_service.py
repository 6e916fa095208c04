"""
Learning Service
================

Business logic for learning goals.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lifeos.core.errors import ErrorCodes, NotFoundError
from lifeos.models.learning import GoalStatus, LearningGoal
from lifeos.schemas.learning import LearningGoalCreate
from lifeos.utils.validators import validate_title


class LearningService:
    """Service for learning goal operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_goal(self, goal_id: uuid.UUID, user_id: uuid.UUID) -> LearningGoal:
        result = await self.db.execute(
            select(LearningGoal).where(LearningGoal.id == goal_id, LearningGoal.user_id == user_id)
        )
        goal = result.scalar_one_or_none()
        if goal is None:
            raise NotFoundError(code=ErrorCodes.GOAL_NOT_FOUND, message="Learning goal not found")
        return goal

    async def list_goals(self, user_id: uuid.UUID) -> list[LearningGoal]:
        result = await self.db.execute(
            select(LearningGoal)
            .where(LearningGoal.user_id == user_id)
            .order_by(LearningGoal.created_at.desc())
        )
        return list(result.scalars().all())

    async def create_goal(self, user_id: uuid.UUID, data: LearningGoalCreate) -> LearningGoal:
        goal = LearningGoal(
            user_id=user_id,
            title=validate_title(data.title),
            description=(data.description or "").strip() or None,
            progress=0,
            status=GoalStatus.IN_PROGRESS,
            target_date=data.target_date,
        )
        self.db.add(goal)
        await self.db.flush()
        await self.db.refresh(goal)
        return goal

    async def update_progress(self, goal_id: uuid.UUID, user_id: uuid.UUID, progress: int) -> LearningGoal:
        """Clamp to 0..100; the status follows from the stored value."""
        goal = await self.get_goal(goal_id, user_id)
        goal.set_progress(progress)
        await self.db.flush()
        await self.db.refresh(goal)
        return goal

    async def delete_goal(self, goal_id: uuid.UUID, user_id: uuid.UUID) -> None:
        goal = await self.get_goal(goal_id, user_id)
        await self.db.delete(goal)
        await self.db.flush()
