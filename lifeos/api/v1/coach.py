"""
Life Coach API Endpoints
========================

AI relay for the life coach.

- `POST /chat` streams the completion gateway's event stream back verbatim
  (`text/event-stream`, OpenAI-style `data:` frames ending in `[DONE]`)
- `POST /alignment` answers a vision/values alignment check as JSON

Errors use the flat relay shape `{"error": "..."}` that the chat client
reads directly.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from lifeos.config import settings
from lifeos.core.rate_limit import RateLimiter
from lifeos.dependencies import DBSession, RelayUser
from lifeos.schemas.coach import AlignmentRequest, AlignmentResponse, ChatRequest
from lifeos.schemas.common import RelayErrorResponse
from lifeos.services.ai_gateway import AIGatewayClient, get_ai_gateway
from lifeos.services.coach_context import (
    ALIGNMENT_FALLBACK,
    CoachContextService,
    build_alignment_prompt,
    build_chat_messages,
    build_system_prompt,
)
from lifeos.utils.helpers import local_today

logger = logging.getLogger(__name__)

router = APIRouter()

Gateway = Annotated[AIGatewayClient, Depends(get_ai_gateway)]

RELAY_ERRORS = {
    401: {"model": RelayErrorResponse},
    402: {"model": RelayErrorResponse},
    429: {"model": RelayErrorResponse},
    500: {"model": RelayErrorResponse},
}


@router.post(
    "/chat",
    response_class=StreamingResponse,
    responses={
        200: {"content": {"text/event-stream": {}}},
        **RELAY_ERRORS,
    },
)
async def chat(
    chat_request: ChatRequest,
    current_user: RelayUser,
    db: DBSession,
    gateway: Gateway,
):
    """
    Stream a coach reply grounded in the caller's recent data.

    The upstream stream is opened before the response starts, so gateway
    errors (429, 402, others) still come back as a JSON error with the
    matching status code.
    """
    await RateLimiter.enforce(str(current_user.user_id), "ai")

    ctx = await CoachContextService(db).chat_context(current_user.user_id, local_today())
    messages = build_chat_messages(
        build_system_prompt(ctx),
        chat_request.conversation_history,
        chat_request.message,
        settings.COACH_HISTORY_LIMIT,
    )

    upstream = await gateway.open_stream(messages)
    logger.info("Coach stream opened for user %s", current_user.user_id)

    return StreamingResponse(
        upstream.aiter_bytes(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
        background=BackgroundTask(upstream.aclose),
    )


@router.post(
    "/alignment",
    response_model=AlignmentResponse,
    responses=RELAY_ERRORS,
)
async def alignment_check(
    alignment_request: AlignmentRequest,
    current_user: RelayUser,
    db: DBSession,
    gateway: Gateway,
):
    """How well recent habits, tasks, decisions and moods match the stated vision."""
    await RateLimiter.enforce(str(current_user.user_id), "ai")

    ctx = await CoachContextService(db).alignment_context(current_user.user_id)
    prompt = build_alignment_prompt(alignment_request.vision, alignment_request.values, ctx)

    content = await gateway.complete([{"role": "user", "content": prompt}])
    return AlignmentResponse(response=content or ALIGNMENT_FALLBACK)
