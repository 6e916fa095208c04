"""
Tasks API Endpoints
===================

Personal task list: filter, create, toggle and delete.
"""

from typing import Optional
import uuid

from fastapi import APIRouter, Query, status

from lifeos.dependencies import CurrentUser, DBSession
from lifeos.models.task import TaskStatus
from lifeos.schemas.common import DeleteResponse
from lifeos.schemas.task import TaskCreate, TaskListResponse, TaskResponse
from lifeos.services.cache import CacheInvalidator
from lifeos.services.task_service import TaskService

router = APIRouter()


@router.get(
    "",
    response_model=TaskListResponse,
)
async def list_tasks(
    current_user: CurrentUser,
    db: DBSession,
    status_filter: Optional[TaskStatus] = Query(default=None, alias="status"),
    category: Optional[str] = Query(default=None, max_length=50),
):
    """
    List tasks newest first.

    **Query Parameters:**
    - status: `pending` or `completed`
    - category: exact category name
    """
    tasks = await TaskService(db).list_tasks(current_user.user_id, status_filter, category)
    return TaskListResponse(data=[t.to_api_dict() for t in tasks])


@router.post(
    "",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_task(
    task_data: TaskCreate,
    current_user: CurrentUser,
    db: DBSession,
):
    """Create a pending task."""
    task = await TaskService(db).create_task(current_user.user_id, task_data)
    await db.commit()
    await CacheInvalidator.on_activity_change(str(current_user.user_id))
    return TaskResponse(data=task.to_api_dict())


@router.patch(
    "/{task_id}/toggle",
    response_model=TaskResponse,
)
async def toggle_task(
    task_id: uuid.UUID,
    current_user: CurrentUser,
    db: DBSession,
):
    """Flip a task between pending and completed."""
    task = await TaskService(db).toggle_task(task_id, current_user.user_id)
    await db.commit()
    await CacheInvalidator.on_activity_change(str(current_user.user_id))
    return TaskResponse(data=task.to_api_dict())


@router.delete(
    "/{task_id}",
    response_model=DeleteResponse,
)
async def delete_task(
    task_id: uuid.UUID,
    current_user: CurrentUser,
    db: DBSession,
):
    await TaskService(db).delete_task(task_id, current_user.user_id)
    await db.commit()
    await CacheInvalidator.on_activity_change(str(current_user.user_id))
    return DeleteResponse(message="Task deleted")
