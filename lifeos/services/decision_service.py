"""
Decision Service
================

Decision helper: asks the completion gateway for a pros/cons breakdown and
stores the result as a new decision.

When the gateway is not configured, or its answer is not the JSON shape we
asked for, the generic analysis below is stored instead so the feature keeps
working offline.
"""

import logging
from typing import Optional
import uuid

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lifeos.core.errors import ErrorCodes, GatewayNotConfiguredError, NotFoundError
from lifeos.models.decision import Decision
from lifeos.schemas.decision import DecisionAnalysis, DecisionAnalyzeRequest
from lifeos.services.ai_gateway import AIGatewayClient, parse_json_answer
from lifeos.utils.validators import validate_title

logger = logging.getLogger(__name__)


GENERIC_ANALYSIS = DecisionAnalysis(
    pros=[
        "Could lead to personal growth and new experiences",
        "Aligns with your long-term goals",
        "Has potential for positive outcomes",
    ],
    cons=[
        "May require significant time investment",
        "Some uncertainty about the outcome",
        "Could involve trade-offs with other priorities",
    ],
    recommendation=(
        "Based on the analysis, this decision seems to have more potential benefits "
        "than drawbacks. Consider making a small step forward to test the waters "
        "before fully committing."
    ),
)

ANALYSIS_SYSTEM_PROMPT = (
    "You help people think through personal decisions. Answer ONLY with a JSON "
    'object of the form {"pros": [string], "cons": [string], "recommendation": string}. '
    "Give three to five short pros and cons and a recommendation of two or three "
    "sentences. Be balanced and practical."
)


def build_analysis_messages(question: str, context: Optional[str]) -> list[dict]:
    user_content = f"Decision: {question}"
    if context:
        user_content += f"\n\nContext: {context}"
    return [
        {"role": "system", "content": ANALYSIS_SYSTEM_PROMPT},
        {"role": "user", "content": user_content},
    ]


def parse_analysis(content: Optional[str]) -> DecisionAnalysis:
    """Validate a model answer, falling back to the generic analysis."""
    if not content:
        return GENERIC_ANALYSIS

    data = parse_json_answer(content)
    if not isinstance(data, dict):
        return GENERIC_ANALYSIS

    try:
        analysis = DecisionAnalysis.model_validate(data)
    except PydanticValidationError as e:
        logger.warning("Decision analysis has unexpected shape: %s", e)
        return GENERIC_ANALYSIS

    if not analysis.pros and not analysis.cons:
        return GENERIC_ANALYSIS
    return analysis


class DecisionService:
    """Service for decision operations."""

    def __init__(self, db: AsyncSession, gateway: Optional[AIGatewayClient] = None):
        self.db = db
        self.gateway = gateway

    async def list_decisions(self, user_id: uuid.UUID) -> list[Decision]:
        result = await self.db.execute(
            select(Decision)
            .where(Decision.user_id == user_id)
            .order_by(Decision.created_at.desc())
        )
        return list(result.scalars().all())

    async def analyze(self, question: str, context: Optional[str]) -> DecisionAnalysis:
        """
        Ask the gateway for an analysis.

        Raises:
            RelayError: when the gateway answers 429, 402 or another error
        """
        if self.gateway is None:
            return GENERIC_ANALYSIS

        try:
            content = await self.gateway.complete(build_analysis_messages(question, context))
        except GatewayNotConfiguredError:
            logger.info("AI gateway not configured, using generic decision analysis")
            return GENERIC_ANALYSIS

        return parse_analysis(content)

    async def analyze_and_create(self, user_id: uuid.UUID, data: DecisionAnalyzeRequest) -> Decision:
        question = validate_title(data.question, field="question")
        context = (data.context or "").strip() or None

        analysis = await self.analyze(question, context)

        decision = Decision(
            user_id=user_id,
            question=question,
            context=context,
            pros=list(analysis.pros),
            cons=list(analysis.cons),
            recommendation=analysis.recommendation or None,
            status="pending",
        )
        self.db.add(decision)
        await self.db.flush()
        await self.db.refresh(decision)

        logger.info("Decision %s analyzed for user %s", decision.id, user_id)
        return decision

    async def delete_decision(self, decision_id: uuid.UUID, user_id: uuid.UUID) -> None:
        result = await self.db.execute(
            select(Decision).where(Decision.id == decision_id, Decision.user_id == user_id)
        )
        decision = result.scalar_one_or_none()
        if decision is None:
            raise NotFoundError(code=ErrorCodes.DECISION_NOT_FOUND, message="Decision not found")
        await self.db.delete(decision)
        await self.db.flush()
