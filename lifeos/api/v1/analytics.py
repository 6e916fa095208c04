"""
Analytics API Endpoints
=======================

Dashboard cards and the analytics page.
"""

from fastapi import APIRouter

from lifeos.dependencies import CurrentUser, DBSession
from lifeos.schemas.common import BaseResponse
from lifeos.services.analytics_service import AnalyticsService
from lifeos.utils.helpers import local_today

router = APIRouter()


@router.get(
    "/dashboard",
    response_model=BaseResponse[dict],
)
async def get_dashboard(
    current_user: CurrentUser,
    db: DBSession,
):
    """
    Dashboard payload.

    Weekly summary, one smart insight, notifications, the first five
    habits with streaks, pending tasks, active learning goals and this
    month's spending.
    """
    data = await AnalyticsService(db).dashboard(current_user.user_id, local_today())
    return BaseResponse(data=data)


@router.get(
    "",
    response_model=BaseResponse[dict],
)
async def get_analytics(
    current_user: CurrentUser,
    db: DBSession,
):
    """Seven-day task activity, six months of spending, top categories, stats."""
    data = await AnalyticsService(db).analytics_page(current_user.user_id, local_today())
    return BaseResponse(data=data)
