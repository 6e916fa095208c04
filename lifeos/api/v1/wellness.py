"""
Wellness API Endpoints
======================

Mood check-ins, reflections, burnout report and reflection prompts.
"""

from fastapi import APIRouter, status

from lifeos.dependencies import CurrentUser, DBSession
from lifeos.schemas.common import BaseResponse
from lifeos.schemas.wellness import BurnoutReport, MoodCheckIn, ReflectionCreate
from lifeos.services.wellness_service import WellnessService, random_reflection_prompt
from lifeos.utils.helpers import local_today

router = APIRouter()


@router.get(
    "",
    response_model=BaseResponse[dict],
)
async def get_week_overview(
    current_user: CurrentUser,
    db: DBSession,
):
    """Today's check-in, this week's moods and reflections, weekly averages."""
    overview = await WellnessService(db).week_overview(current_user.user_id, local_today())
    return BaseResponse(data=overview)


@router.put(
    "/mood",
    response_model=BaseResponse[dict],
)
async def save_mood(
    mood_data: MoodCheckIn,
    current_user: CurrentUser,
    db: DBSession,
):
    """Save today's mood; a second check-in the same day replaces the first."""
    mood = await WellnessService(db).save_mood(current_user.user_id, mood_data, local_today())
    return BaseResponse(data=mood.to_api_dict(), message="Mood saved")


@router.post(
    "/reflections",
    response_model=BaseResponse[dict],
    status_code=status.HTTP_201_CREATED,
)
async def add_reflection(
    reflection_data: ReflectionCreate,
    current_user: CurrentUser,
    db: DBSession,
):
    reflection = await WellnessService(db).add_reflection(
        current_user.user_id,
        reflection_data,
        local_today(),
    )
    return BaseResponse(data=reflection.to_api_dict(), message="Reflection saved")


@router.get(
    "/burnout",
    response_model=BaseResponse[BurnoutReport],
)
async def get_burnout_report(
    current_user: CurrentUser,
    db: DBSession,
):
    """Advisory flags from the last 30 days of check-ins and tasks."""
    report = await WellnessService(db).burnout_report(current_user.user_id, local_today())
    return BaseResponse(data=report)


@router.get(
    "/prompt",
    response_model=BaseResponse[dict],
)
async def get_reflection_prompt(current_user: CurrentUser):
    return BaseResponse(data={"prompt": random_reflection_prompt()})
