"""
Time API Endpoints
==================

Day planner blocks and the focus timer log.
"""

from datetime import date
from typing import Optional
import uuid

from fastapi import APIRouter, Query, status

from lifeos.dependencies import CurrentUser, DBSession
from lifeos.schemas.common import BaseResponse, DeleteResponse
from lifeos.schemas.time_block import FocusSessionCreate, FocusStats, TimeBlockCreate
from lifeos.services.time_service import TimeService
from lifeos.utils.helpers import local_today

router = APIRouter()


# =============================================================================
# Time blocks
# =============================================================================

@router.get(
    "/blocks",
    response_model=BaseResponse[list[dict]],
)
async def list_blocks(
    current_user: CurrentUser,
    db: DBSession,
    day: Optional[date] = Query(default=None),
):
    """
    Blocks for one day, earliest first.

    **Query Parameters:**
    - day: `YYYY-MM-DD`, defaults to today
    """
    blocks = await TimeService(db).list_blocks(current_user.user_id, day or local_today())
    return BaseResponse(data=[b.to_api_dict() for b in blocks])


@router.post(
    "/blocks",
    response_model=BaseResponse[dict],
    status_code=status.HTTP_201_CREATED,
)
async def create_block(
    block_data: TimeBlockCreate,
    current_user: CurrentUser,
    db: DBSession,
):
    block = await TimeService(db).create_block(current_user.user_id, block_data)
    return BaseResponse(data=block.to_api_dict(), message="Time block added")


@router.delete(
    "/blocks/{block_id}",
    response_model=DeleteResponse,
)
async def delete_block(
    block_id: uuid.UUID,
    current_user: CurrentUser,
    db: DBSession,
):
    await TimeService(db).delete_block(block_id, current_user.user_id)
    return DeleteResponse(message="Time block deleted")


# =============================================================================
# Focus sessions
# =============================================================================

@router.get(
    "/focus",
    response_model=BaseResponse[list[dict]],
)
async def list_sessions(
    current_user: CurrentUser,
    db: DBSession,
):
    """The 50 most recent focus sessions."""
    sessions = await TimeService(db).list_sessions(current_user.user_id)
    return BaseResponse(data=[s.to_api_dict() for s in sessions])


@router.post(
    "/focus",
    response_model=BaseResponse[dict],
    status_code=status.HTTP_201_CREATED,
)
async def log_session(
    session_data: FocusSessionCreate,
    current_user: CurrentUser,
    db: DBSession,
):
    session = await TimeService(db).log_session(current_user.user_id, session_data)
    return BaseResponse(
        data=session.to_api_dict(),
        message=f"Great focus! {session.duration_minutes} minutes logged.",
    )


@router.get(
    "/focus/stats",
    response_model=BaseResponse[FocusStats],
)
async def focus_stats(
    current_user: CurrentUser,
    db: DBSession,
):
    """
    This week's focus minutes (weeks start Monday), sessions today, the
    average session length and minutes per category.
    """
    stats = await TimeService(db).focus_stats(current_user.user_id, local_today())
    return BaseResponse(data=FocusStats(**stats))
