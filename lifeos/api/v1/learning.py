"""
Learning Goals API Endpoints
============================
"""

import uuid

from fastapi import APIRouter, status

from lifeos.dependencies import CurrentUser, DBSession
from lifeos.schemas.common import BaseResponse, DeleteResponse
from lifeos.schemas.learning import LearningGoalCreate, LearningGoalProgress
from lifeos.services.learning_service import LearningService

router = APIRouter()


@router.get(
    "",
    response_model=BaseResponse[list[dict]],
)
async def list_goals(
    current_user: CurrentUser,
    db: DBSession,
):
    goals = await LearningService(db).list_goals(current_user.user_id)
    return BaseResponse(data=[g.to_api_dict() for g in goals])


@router.post(
    "",
    response_model=BaseResponse[dict],
    status_code=status.HTTP_201_CREATED,
)
async def create_goal(
    goal_data: LearningGoalCreate,
    current_user: CurrentUser,
    db: DBSession,
):
    goal = await LearningService(db).create_goal(current_user.user_id, goal_data)
    return BaseResponse(data=goal.to_api_dict(), message="Goal created")


@router.patch(
    "/{goal_id}/progress",
    response_model=BaseResponse[dict],
)
async def update_progress(
    goal_id: uuid.UUID,
    progress_data: LearningGoalProgress,
    current_user: CurrentUser,
    db: DBSession,
):
    """
    Set progress (clamped to 0-100).

    Reaching 100 marks the goal completed; dropping below moves it back
    to in progress.
    """
    goal = await LearningService(db).update_progress(goal_id, current_user.user_id, progress_data.progress)
    return BaseResponse(data=goal.to_api_dict())


@router.delete(
    "/{goal_id}",
    response_model=DeleteResponse,
)
async def delete_goal(
    goal_id: uuid.UUID,
    current_user: CurrentUser,
    db: DBSession,
):
    await LearningService(db).delete_goal(goal_id, current_user.user_id)
    return DeleteResponse(message="Goal deleted")
