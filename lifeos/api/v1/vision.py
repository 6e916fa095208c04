"""
Life Vision API Endpoints
=========================

The caller's future vision, the dated life roadmap, and an alignment check
of recent activity against the saved vision.
"""

import uuid

from fastapi import APIRouter, status

from lifeos.api.v1.coach import RELAY_ERRORS, Gateway
from lifeos.core.rate_limit import RateLimiter
from lifeos.dependencies import CurrentUser, DBSession, RelayUser
from lifeos.models.vision import RoadmapStatus
from lifeos.schemas.coach import AlignmentResponse
from lifeos.schemas.common import BaseResponse, DeleteResponse
from lifeos.schemas.vision import RoadmapItemCreate, RoadmapStatusUpdate, VisionSave
from lifeos.services.coach_context import ALIGNMENT_FALLBACK, CoachContextService, build_alignment_prompt
from lifeos.services.vision_service import VisionService
from lifeos.utils.helpers import local_today

router = APIRouter()


# =============================================================================
# Vision
# =============================================================================

@router.get(
    "",
    response_model=BaseResponse[dict],
)
async def get_vision(
    current_user: CurrentUser,
    db: DBSession,
):
    """The saved vision, or `data: null` before the first save."""
    vision = await VisionService(db).get_vision(current_user.user_id)
    return BaseResponse(data=vision.to_api_dict() if vision else None)


@router.put(
    "",
    response_model=BaseResponse[dict],
)
async def save_vision(
    vision_data: VisionSave,
    current_user: CurrentUser,
    db: DBSession,
):
    vision = await VisionService(db).save_vision(current_user.user_id, vision_data, local_today())
    return BaseResponse(data=vision.to_api_dict(), message="Vision saved!")


@router.post(
    "/alignment",
    response_model=AlignmentResponse,
    responses=RELAY_ERRORS,
)
async def check_alignment(
    current_user: RelayUser,
    db: DBSession,
    gateway: Gateway,
):
    """Alignment check against the saved vision and values."""
    vision = await VisionService(db).require_vision(current_user.user_id)
    await RateLimiter.enforce(str(current_user.user_id), "ai")

    ctx = await CoachContextService(db).alignment_context(current_user.user_id)
    prompt = build_alignment_prompt(vision.vision_text, list(vision.values or []), ctx)

    content = await gateway.complete([{"role": "user", "content": prompt}])
    return AlignmentResponse(response=content or ALIGNMENT_FALLBACK)


# =============================================================================
# Roadmap
# =============================================================================

@router.get(
    "/roadmap",
    response_model=BaseResponse[list[dict]],
)
async def list_roadmap(
    current_user: CurrentUser,
    db: DBSession,
):
    """Roadmap items by target date, soonest first."""
    items = await VisionService(db).list_roadmap(current_user.user_id)
    return BaseResponse(data=[i.to_api_dict() for i in items])


@router.post(
    "/roadmap",
    response_model=BaseResponse[dict],
    status_code=status.HTTP_201_CREATED,
)
async def add_roadmap_item(
    item_data: RoadmapItemCreate,
    current_user: CurrentUser,
    db: DBSession,
):
    item = await VisionService(db).add_item(current_user.user_id, item_data)
    return BaseResponse(data=item.to_api_dict(), message="Roadmap item added!")


@router.patch(
    "/roadmap/{item_id}/status",
    response_model=BaseResponse[dict],
)
async def update_roadmap_status(
    item_id: uuid.UUID,
    status_data: RoadmapStatusUpdate,
    current_user: CurrentUser,
    db: DBSession,
):
    item = await VisionService(db).set_status(item_id, current_user.user_id, status_data.status)
    message = "Congratulations!" if status_data.status is RoadmapStatus.ACHIEVED else "Status updated"
    return BaseResponse(data=item.to_api_dict(), message=message)


@router.delete(
    "/roadmap/{item_id}",
    response_model=DeleteResponse,
)
async def delete_roadmap_item(
    item_id: uuid.UUID,
    current_user: CurrentUser,
    db: DBSession,
):
    await VisionService(db).delete_item(item_id, current_user.user_id)
    return DeleteResponse(message="Item deleted")
