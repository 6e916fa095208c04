"""
AI Gateway Tests
================

Tests for the completion gateway client against an ``httpx.MockTransport``.
"""

import json

import httpx
import pytest

from lifeos.core.errors import (
    GatewayNotConfiguredError,
    UpstreamCreditsError,
    UpstreamError,
    UpstreamRateLimitError,
)
from lifeos.services.ai_gateway import AIGatewayClient, parse_json_answer, strip_code_fences

MESSAGES = [{"role": "user", "content": "Hi"}]


def _gateway(handler) -> AIGatewayClient:
    gateway = AIGatewayClient(http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
    gateway.api_key = "test-key"
    return gateway


class TestComplete:
    """Tests for AIGatewayClient.complete"""

    @pytest.mark.asyncio
    async def test_returns_message_content(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"choices": [{"message": {"content": "Hello!"}}]})

        gateway = _gateway(handler)
        content = await gateway.complete(MESSAGES)
        await gateway.aclose()

        assert content == "Hello!"
        assert seen["auth"] == "Bearer test-key"
        assert seen["body"]["messages"] == MESSAGES
        assert "stream" not in seen["body"]

    @pytest.mark.asyncio
    async def test_missing_content_is_none(self):
        gateway = _gateway(lambda request: httpx.Response(200, json={"choices": []}))

        assert await gateway.complete(MESSAGES) is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status_code, error_class, http_status",
        [
            (429, UpstreamRateLimitError, 429),
            (402, UpstreamCreditsError, 402),
            (500, UpstreamError, 500),
            (503, UpstreamError, 500),
        ],
    )
    async def test_maps_upstream_status(self, status_code, error_class, http_status):
        gateway = _gateway(lambda request: httpx.Response(status_code, text="upstream says no"))

        with pytest.raises(error_class) as exc_info:
            await gateway.complete(MESSAGES)

        assert exc_info.value.status_code == http_status

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamError):
            await _gateway(handler).complete(MESSAGES)

    @pytest.mark.asyncio
    async def test_not_configured(self):
        gateway = _gateway(lambda request: httpx.Response(200, json={}))
        gateway.api_key = ""

        with pytest.raises(GatewayNotConfiguredError):
            await gateway.complete(MESSAGES)


class TestOpenStream:
    """Tests for AIGatewayClient.open_stream"""

    @pytest.mark.asyncio
    async def test_streams_body(self):
        body = b'data: {"choices":[{"delta":{"content":"Hi"}}]}\n\ndata: [DONE]\n\n'
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, content=body, headers={"Content-Type": "text/event-stream"})

        response = await _gateway(handler).open_stream(MESSAGES)
        chunks = [chunk async for chunk in response.aiter_bytes()]
        await response.aclose()

        assert b"".join(chunks) == body
        assert seen["body"]["stream"] is True

    @pytest.mark.asyncio
    async def test_error_before_streaming(self):
        gateway = _gateway(lambda request: httpx.Response(402, text="no credits"))

        with pytest.raises(UpstreamCreditsError):
            await gateway.open_stream(MESSAGES)


class TestJsonAnswers:
    """Tests for parsing JSON model answers"""

    def test_strips_code_fences(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
        assert strip_code_fences('  {"a": 1} ') == '{"a": 1}'

    def test_parse_json_answer(self):
        assert parse_json_answer('```json\n{"pros": ["x"]}\n```') == {"pros": ["x"]}
        assert parse_json_answer("Sure! Here are some pros") is None
