"""
Knowledge Recall API Endpoints
==============================

Ask questions about, or summarize, the caller's notes and learning goals.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from lifeos.core.rate_limit import RateLimiter
from lifeos.dependencies import DBSession, RelayUser
from lifeos.schemas.coach import RecallRequest, RecallResponse
from lifeos.schemas.common import RelayErrorResponse
from lifeos.services.ai_gateway import AIGatewayClient, get_ai_gateway
from lifeos.services.coach_context import RECALL_FALLBACK, CoachContextService, build_recall_messages

router = APIRouter()


@router.post(
    "/recall",
    response_model=RecallResponse,
    responses={code: {"model": RelayErrorResponse} for code in (401, 402, 429, 500)},
)
async def recall(
    recall_request: RecallRequest,
    current_user: RelayUser,
    db: DBSession,
    gateway: Annotated[AIGatewayClient, Depends(get_ai_gateway)],
):
    """
    `action: "ask"` answers `question` from the 20 most recently edited
    notes and every learning goal; `action: "summarize"` summarizes them.
    """
    await RateLimiter.enforce(str(current_user.user_id), "ai")

    ctx = await CoachContextService(db).recall_context(current_user.user_id)
    messages = build_recall_messages(recall_request.action, recall_request.question, ctx)

    content = await gateway.complete(messages)
    return RecallResponse(answer=content or RECALL_FALLBACK)
