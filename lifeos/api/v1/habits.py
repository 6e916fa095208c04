"""
Habits API Endpoints
====================

Daily habits with completion toggles and streaks.
"""

import uuid

from fastapi import APIRouter, status

from lifeos.dependencies import CurrentUser, DBSession
from lifeos.schemas.common import BaseResponse, DeleteResponse
from lifeos.schemas.habit import HabitCreate, HabitListResponse, HabitToggleResponse
from lifeos.services.cache import CacheInvalidator
from lifeos.services.habit_service import HabitService
from lifeos.utils.helpers import local_today

router = APIRouter()


@router.get(
    "",
    response_model=HabitListResponse,
)
async def list_habits(
    current_user: CurrentUser,
    db: DBSession,
):
    """Active habits with today's completion flag and current streak."""
    habits = await HabitService(db).list_with_status(current_user.user_id, local_today())
    return HabitListResponse(data=habits)


@router.post(
    "",
    response_model=BaseResponse[dict],
    status_code=status.HTTP_201_CREATED,
)
async def create_habit(
    habit_data: HabitCreate,
    current_user: CurrentUser,
    db: DBSession,
):
    habit = await HabitService(db).create_habit(current_user.user_id, habit_data)
    return BaseResponse(data=habit.to_api_dict(), message="Habit created")


@router.post(
    "/{habit_id}/toggle",
    response_model=HabitToggleResponse,
)
async def toggle_habit_today(
    habit_id: uuid.UUID,
    current_user: CurrentUser,
    db: DBSession,
):
    """Mark today's log done, or undo it."""
    today = local_today()
    completed = await HabitService(db).toggle_day(habit_id, current_user.user_id, today)
    await db.commit()
    await CacheInvalidator.on_activity_change(str(current_user.user_id))
    return HabitToggleResponse(data={
        "habit_id": str(habit_id),
        "date": today.isoformat(),
        "completed": completed,
    })


@router.patch(
    "/{habit_id}/archive",
    response_model=BaseResponse[dict],
)
async def archive_habit(
    habit_id: uuid.UUID,
    current_user: CurrentUser,
    db: DBSession,
):
    habit = await HabitService(db).archive_habit(habit_id, current_user.user_id)
    await db.commit()
    await CacheInvalidator.on_activity_change(str(current_user.user_id))
    return BaseResponse(data=habit.to_api_dict(), message="Habit archived")


@router.delete(
    "/{habit_id}",
    response_model=DeleteResponse,
)
async def delete_habit(
    habit_id: uuid.UUID,
    current_user: CurrentUser,
    db: DBSession,
):
    """Delete a habit and its logs."""
    await HabitService(db).delete_habit(habit_id, current_user.user_id)
    await db.commit()
    await CacheInvalidator.on_activity_change(str(current_user.user_id))
    return DeleteResponse(message="Habit deleted")
