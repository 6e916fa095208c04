"""
Decision Helper Tests
=====================

Tests for decision analysis parsing, the offline fallback and the
analyze endpoint.
"""

import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock
import uuid

import pytest
from httpx import AsyncClient

from lifeos.core.errors import GatewayNotConfiguredError, UpstreamRateLimitError
from lifeos.schemas.decision import DecisionAnalyzeRequest
from lifeos.services.decision_service import GENERIC_ANALYSIS, DecisionService, parse_analysis
from tests.conftest import USER_ID, make_session

ANSWER = {
    "pros": ["Higher salary", "New skills"],
    "cons": ["Longer commute"],
    "recommendation": "Take it if the commute is manageable.",
}


class TestParseAnalysis:
    """Tests for parse_analysis"""

    def test_valid_answer(self):
        analysis = parse_analysis(json.dumps(ANSWER))

        assert analysis.pros == ANSWER["pros"]
        assert analysis.cons == ANSWER["cons"]
        assert analysis.recommendation == ANSWER["recommendation"]

    def test_fenced_answer(self):
        analysis = parse_analysis(f"```json\n{json.dumps(ANSWER)}\n```")

        assert analysis.pros == ANSWER["pros"]

    @pytest.mark.parametrize(
        "content",
        [
            None,
            "",
            "I think you should go for it!",
            json.dumps(["a", "list"]),
            json.dumps({"pros": "not a list"}),
            json.dumps({"pros": [], "cons": [], "recommendation": "?"}),
        ],
    )
    def test_falls_back_to_generic(self, content):
        assert parse_analysis(content) is GENERIC_ANALYSIS


class TestDecisionService:
    """Tests for DecisionService.analyze / analyze_and_create"""

    @pytest.mark.asyncio
    async def test_without_gateway(self):
        analysis = await DecisionService(make_session()).analyze("Move city?", None)

        assert analysis is GENERIC_ANALYSIS

    @pytest.mark.asyncio
    async def test_unconfigured_gateway(self):
        gateway = AsyncMock()
        gateway.complete.side_effect = GatewayNotConfiguredError()

        analysis = await DecisionService(make_session(), gateway).analyze("Move city?", None)

        assert analysis is GENERIC_ANALYSIS

    @pytest.mark.asyncio
    async def test_upstream_rate_limit_propagates(self):
        gateway = AsyncMock()
        gateway.complete.side_effect = UpstreamRateLimitError()

        with pytest.raises(UpstreamRateLimitError):
            await DecisionService(make_session(), gateway).analyze("Move city?", None)

    @pytest.mark.asyncio
    async def test_prompt_includes_context(self):
        gateway = AsyncMock()
        gateway.complete.return_value = json.dumps(ANSWER)

        await DecisionService(make_session(), gateway).analyze("Take the job?", "It is remote")

        messages = gateway.complete.call_args.args[0]
        assert messages[0]["role"] == "system"
        assert messages[1]["content"] == "Decision: Take the job?\n\nContext: It is remote"

    @pytest.mark.asyncio
    async def test_stored_lists_are_copies(self):
        db = make_session()

        decision = await DecisionService(db).analyze_and_create(
            USER_ID,
            DecisionAnalyzeRequest(question="  Adopt a dog?  ", context="   "),
        )

        assert decision.question == "Adopt a dog?"
        assert decision.context is None
        assert decision.pros == GENERIC_ANALYSIS.pros
        assert decision.pros is not GENERIC_ANALYSIS.pros
        assert decision.status == "pending"


@pytest.mark.asyncio
async def test_analyze_endpoint(client: AsyncClient, db_session, gateway):
    async def fill(obj):
        obj.id = uuid.uuid4()
        obj.created_at = datetime(2026, 10, 19, tzinfo=timezone.utc)

    db_session.refresh.side_effect = fill
    gateway.complete.return_value = f"```json\n{json.dumps(ANSWER)}\n```"

    response = await client.post("/api/v1/decisions/analyze", json={"question": "Take the job?"})

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Decision analyzed!"
    assert body["data"]["pros"] == ANSWER["pros"]
    assert body["data"]["recommendation"] == ANSWER["recommendation"]
