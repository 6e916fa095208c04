"""
Coach Chat Client Tests
=======================

Tests for the streaming chat client against an ``httpx.MockTransport``.
"""

import json
from unittest.mock import MagicMock

import httpx
import pytest

from lifeos.client.coach import CHAT_PATH, CoachChat, TurnState


def _sse(*contents: str) -> bytes:
    frames = [
        f"data: {json.dumps({'choices': [{'delta': {'content': c}}]})}\n\n"
        for c in contents
    ]
    return ("".join(frames) + "data: [DONE]\n\n").encode("utf-8")


def _chat(handler, **kwargs) -> CoachChat:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CoachChat("http://api.test/", "token-123", http_client=http_client, **kwargs)


class TestCoachChat:
    """Tests for CoachChat.send"""

    @pytest.mark.asyncio
    async def test_streams_reply_into_messages(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, content=_sse("You're ", "doing ", "well."))

        updates = []
        chat = _chat(handler, on_update=lambda message: updates.append(message.content))

        reply = await chat.send("How am I doing?")

        assert reply == "You're doing well."
        assert chat.state == TurnState.DONE
        assert [m.role for m in chat.messages] == ["user", "assistant"]
        assert chat.messages[-1].content == "You're doing well."
        assert updates[-1] == "You're doing well."
        assert seen["url"] == f"http://api.test{CHAT_PATH}"
        assert seen["auth"] == "Bearer token-123"
        assert seen["body"] == {"message": "How am I doing?", "conversationHistory": []}

    @pytest.mark.asyncio
    async def test_sends_trailing_history(self):
        bodies = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, content=_sse("ok"))

        chat = _chat(handler, history_limit=2)
        await chat.send("one")
        await chat.send("two")

        assert bodies[1]["conversationHistory"] == [
            {"role": "user", "content": "one"},
            {"role": "assistant", "content": "ok"},
        ]
        assert len(chat.messages) == 4

    @pytest.mark.asyncio
    async def test_error_status_keeps_user_message(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, json={"error": "Rate limit exceeded. Please try again in a moment."})

        on_error = MagicMock()
        chat = _chat(handler, on_error=on_error)

        reply = await chat.send("Hello")

        assert reply is None
        assert chat.state == TurnState.ERRORED
        assert chat.error == "Rate limit exceeded. Please try again in a moment."
        assert [m.role for m in chat.messages] == ["user"]
        on_error.assert_called_once_with("Rate limit exceeded. Please try again in a moment.")

    @pytest.mark.asyncio
    async def test_non_json_error_body(self):
        chat = _chat(lambda request: httpx.Response(500, text="Bad Gateway"))

        await chat.send("Hello")

        assert chat.error == "Failed to get response"

    @pytest.mark.asyncio
    async def test_transport_failure_removes_placeholder(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadError("connection reset", request=request)

        chat = _chat(handler)

        reply = await chat.send("Hello")

        assert reply is None
        assert chat.state == TurnState.ERRORED
        assert [m.role for m in chat.messages] == ["user"]

    @pytest.mark.asyncio
    async def test_failure_mid_stream_removes_partial_reply(self):
        class BrokenStream(httpx.AsyncByteStream):
            async def __aiter__(self):
                yield _sse("Half a ")[:-len(b"data: [DONE]\n\n")]
                raise httpx.ReadError("connection reset")

        chat = _chat(lambda request: httpx.Response(200, stream=BrokenStream()))

        reply = await chat.send("Hello")

        assert reply is None
        assert chat.state == TurnState.ERRORED
        assert [m.role for m in chat.messages] == ["user"]
        assert chat.messages[0].content == "Hello"

    @pytest.mark.asyncio
    async def test_blank_message_is_ignored(self):
        handler = MagicMock()
        chat = _chat(handler)

        assert await chat.send("   ") is None
        assert chat.messages == []
        assert chat.state == TurnState.IDLE
        handler.assert_not_called()

    @pytest.mark.asyncio
    async def test_send_while_busy_is_ignored(self):
        handler = MagicMock()
        chat = _chat(handler)
        chat.state = TurnState.STREAMING

        assert await chat.send("Hello") is None
        handler.assert_not_called()

    @pytest.mark.asyncio
    async def test_failing_update_callback_ends_the_turn(self):
        def render(message):
            raise RuntimeError("render failed")

        chat = _chat(lambda request: httpx.Response(200, content=_sse("Hi")), on_update=render)

        with pytest.raises(RuntimeError, match="render failed"):
            await chat.send("hello")

        assert chat.state == TurnState.ERRORED
        assert chat.is_busy is False
        assert chat.error == "render failed"
        assert [(m.role, m.content) for m in chat.messages] == [("user", "hello")]

        chat.on_update = None
        assert await chat.send("again") == "Hi"
        assert chat.state == TurnState.DONE
