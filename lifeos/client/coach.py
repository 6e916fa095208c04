"""
Life Coach Chat Client
======================

Async client for ``POST /api/v1/coach/chat``. Owns the visible message
list of one conversation and assembles the streamed assistant reply.

Usage::

    async with CoachChat(base_url, access_token, on_update=render) as chat:
        reply = await chat.send("How are my habits going?")
"""

import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, Union

import httpx

from lifeos.services.event_stream import EventStreamParser

logger = logging.getLogger(__name__)

CHAT_PATH = "/api/v1/coach/chat"
DEFAULT_HISTORY_LIMIT = 10
DEFAULT_ERROR_MESSAGE = "Failed to get response"


class TurnState(str, Enum):
    IDLE = "idle"
    SENDING = "sending"
    STREAMING = "streaming"
    DONE = "done"
    ERRORED = "errored"


@dataclass
class ChatMessage:
    role: str
    content: str

    def to_dict(self) -> dict:
        return asdict(self)


class CoachChatError(Exception):
    """The relay answered with a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


Callback = Callable[..., Union[None, Awaitable[None]]]


def error_message_from(response: httpx.Response) -> str:
    """
    Pull a human readable message out of an error response.

    Relay endpoints answer ``{"error": "..."}``; the API envelope
    ``{"error": {"message": "..."}}`` is accepted too.
    """
    try:
        body = response.json()
    except ValueError:
        return DEFAULT_ERROR_MESSAGE

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, str) and error:
        return error
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return DEFAULT_ERROR_MESSAGE


class CoachChat:
    """
    One chat conversation with the life coach.

    A turn moves through ``sending -> streaming -> done``, or ends in
    ``errored``. While a turn is in flight further sends are ignored, as
    are blank messages. Failed turns are not retried.

    Args:
        base_url: API root, e.g. ``https://api.example.com``
        access_token: Bearer token from the hosted auth service
        http_client: Optional client to reuse (not closed by ``aclose``)
        history_limit: How many prior messages accompany each turn
        on_update: Called with the assistant message after every delta
        on_error: Called with the error message when a turn fails
    """

    def __init__(
        self,
        base_url: str,
        access_token: str,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        on_update: Optional[Callback] = None,
        on_error: Optional[Callback] = None,
        timeout: float = 60.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.history_limit = history_limit
        self.on_update = on_update
        self.on_error = on_error

        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

        self.messages: list[ChatMessage] = []
        self.state = TurnState.IDLE
        self.error: Optional[str] = None

    async def __aenter__(self) -> "CoachChat":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    @property
    def is_busy(self) -> bool:
        return self.state in (TurnState.SENDING, TurnState.STREAMING)

    async def send(self, text: str) -> Optional[str]:
        """
        Send one user message and stream the reply into ``messages``.

        Returns the assistant text, or None when the message was ignored or
        the turn failed (see ``error``).
        """
        if not text.strip() or self.is_busy:
            return None

        history = [m.to_dict() for m in self.messages[-self.history_limit:]] if self.history_limit else []
        self.messages.append(ChatMessage(role="user", content=text))
        self.state = TurnState.SENDING
        self.error = None

        assistant: Optional[ChatMessage] = None

        try:
            async with self._client.stream(
                "POST",
                f"{self.base_url}{CHAT_PATH}",
                json={"message": text, "conversationHistory": history},
                headers={"Authorization": f"Bearer {self.access_token}"},
            ) as response:
                if not response.is_success:
                    await response.aread()
                    raise CoachChatError(error_message_from(response), response.status_code)

                assistant = ChatMessage(role="assistant", content="")
                self.messages.append(assistant)
                self.state = TurnState.STREAMING

                parser = EventStreamParser()
                async for chunk in response.aiter_bytes():
                    if parser.feed(chunk):
                        assistant.content = parser.text
                        await self._emit(self.on_update, assistant)
                    if parser.done:
                        break

                if parser.close():
                    assistant.content = parser.text
                    await self._emit(self.on_update, assistant)

        except (httpx.HTTPError, CoachChatError) as exc:
            await self._fail(assistant, exc)
            return None
        except Exception as exc:
            # Callback or parser bugs still end the turn before propagating
            await self._fail(assistant, exc)
            raise

        self.state = TurnState.DONE
        return assistant.content

    async def _fail(self, assistant: Optional[ChatMessage], exc: Exception) -> None:
        # The user message stays; only this turn's reply is withdrawn.
        if assistant is not None:
            self.messages = [m for m in self.messages if m is not assistant]

        message = exc.message if isinstance(exc, CoachChatError) else (str(exc) or DEFAULT_ERROR_MESSAGE)
        logger.warning("Coach chat turn failed: %s", message)

        self.error = message
        self.state = TurnState.ERRORED
        await self._emit(self.on_error, message)

    @staticmethod
    async def _emit(callback: Optional[Callback], *args) -> None:
        if callback is None:
            return
        result = callback(*args)
        if result is not None and hasattr(result, "__await__"):
            await result
