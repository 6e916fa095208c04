"""
Decisions API Endpoints
=======================

Decision helper: list, analyze-and-save, delete.
"""

from typing import Annotated
import uuid

from fastapi import APIRouter, Depends, status

from lifeos.core.rate_limit import RateLimiter
from lifeos.dependencies import CurrentUser, DBSession
from lifeos.schemas.common import BaseResponse, DeleteResponse
from lifeos.schemas.decision import DecisionAnalyzeRequest
from lifeos.services.ai_gateway import AIGatewayClient, get_ai_gateway
from lifeos.services.decision_service import DecisionService

router = APIRouter()

Gateway = Annotated[AIGatewayClient, Depends(get_ai_gateway)]


@router.get(
    "",
    response_model=BaseResponse[list[dict]],
)
async def list_decisions(
    current_user: CurrentUser,
    db: DBSession,
):
    decisions = await DecisionService(db).list_decisions(current_user.user_id)
    return BaseResponse(data=[d.to_api_dict() for d in decisions])


@router.post(
    "/analyze",
    response_model=BaseResponse[dict],
    status_code=status.HTTP_201_CREATED,
)
async def analyze_decision(
    request_data: DecisionAnalyzeRequest,
    current_user: CurrentUser,
    db: DBSession,
    gateway: Gateway,
):
    """
    Analyze a decision and save it.

    The completion gateway proposes pros, cons and a recommendation; if
    its answer cannot be used, a generic analysis is saved instead.
    """
    await RateLimiter.enforce(str(current_user.user_id), "ai")
    decision = await DecisionService(db, gateway).analyze_and_create(current_user.user_id, request_data)
    return BaseResponse(data=decision.to_api_dict(), message="Decision analyzed!")


@router.delete(
    "/{decision_id}",
    response_model=DeleteResponse,
)
async def delete_decision(
    decision_id: uuid.UUID,
    current_user: CurrentUser,
    db: DBSession,
):
    await DecisionService(db).delete_decision(decision_id, current_user.user_id)
    return DeleteResponse(message="Decision deleted")
