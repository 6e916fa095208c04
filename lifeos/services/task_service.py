"""
Task Service
============

Business logic for personal task management.
"""

import logging
from typing import Optional
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lifeos.core.errors import ErrorCodes, NotFoundError
from lifeos.models.task import Task, TaskStatus
from lifeos.schemas.task import TaskCreate
from lifeos.utils.validators import validate_title

logger = logging.getLogger(__name__)


class TaskService:
    """Service for task operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_task(self, task_id: uuid.UUID, user_id: uuid.UUID) -> Task:
        """Get task by ID ensuring it belongs to user."""
        result = await self.db.execute(
            select(Task).where(Task.id == task_id, Task.user_id == user_id)
        )
        task = result.scalar_one_or_none()
        if task is None:
            raise NotFoundError(code=ErrorCodes.TASK_NOT_FOUND, message="Task not found")
        return task

    async def list_tasks(
        self,
        user_id: uuid.UUID,
        status: Optional[TaskStatus] = None,
        category: Optional[str] = None,
    ) -> list[Task]:
        """Newest first, optionally filtered by status and/or category."""
        stmt = select(Task).where(Task.user_id == user_id)
        if status is not None:
            stmt = stmt.where(Task.status == status)
        if category:
            stmt = stmt.where(Task.category == category)
        stmt = stmt.order_by(Task.created_at.desc())

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def create_task(self, user_id: uuid.UUID, data: TaskCreate) -> Task:
        task = Task(
            user_id=user_id,
            title=validate_title(data.title),
            category=data.category.strip(),
            status=TaskStatus.PENDING,
        )
        self.db.add(task)
        await self.db.flush()
        await self.db.refresh(task)
        return task

    async def toggle_task(self, task_id: uuid.UUID, user_id: uuid.UUID) -> Task:
        """Flip pending/completed; ``updated_at`` records when it happened."""
        task = await self.get_task(task_id, user_id)
        task.toggle()
        await self.db.flush()
        await self.db.refresh(task)
        return task

    async def delete_task(self, task_id: uuid.UUID, user_id: uuid.UUID) -> None:
        task = await self.get_task(task_id, user_id)
        await self.db.delete(task)
        await self.db.flush()
