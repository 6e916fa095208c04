"""
AI Gateway Service
==================

Client for the OpenAI-compatible chat completions gateway used by the life
coach, knowledge recall and decision helper.

Two call styles:
- ``complete()`` for a single JSON answer
- ``open_stream()`` for ``stream: true``; the caller relays the returned
  response body and must close it

Upstream failures are mapped onto the relay error family so the endpoints
can answer ``{"error": ...}`` with the right status code.
"""

import json
import logging
from typing import Any, Optional

import httpx

from lifeos.config import settings
from lifeos.core.errors import (
    GatewayNotConfiguredError,
    RelayError,
    UpstreamCreditsError,
    UpstreamError,
    UpstreamRateLimitError,
)

logger = logging.getLogger(__name__)


def upstream_error(status_code: int, body: str) -> RelayError:
    """Map a non-2xx gateway status to the error the caller should see."""
    if status_code == 429:
        return UpstreamRateLimitError()
    if status_code == 402:
        return UpstreamCreditsError()

    logger.error("AI gateway error: %d %s", status_code, body[:500])
    return UpstreamError()


def strip_code_fences(content: str) -> str:
    """Remove a surrounding ```json ... ``` block if the model added one."""
    content = content.strip()
    if content.startswith("```"):
        content = content.split("```")[1]
        if content.startswith("json"):
            content = content[4:]
    return content.strip()


def parse_json_answer(content: str) -> Optional[Any]:
    """Parse a model answer as JSON, or None if it is not JSON."""
    try:
        return json.loads(strip_code_fences(content))
    except json.JSONDecodeError as e:
        logger.warning("AI answer is not valid JSON: %s", e)
        return None


class AIGatewayClient:
    """
    Thin async wrapper around the chat completions endpoint.

    A single ``httpx.AsyncClient`` is shared by every request of the
    process; pass one in to use a custom transport.
    """

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None):
        self.url = settings.AI_GATEWAY_URL
        self.api_key = settings.AI_GATEWAY_API_KEY
        self.model = settings.AI_MODEL
        self._client = http_client

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=settings.AI_TIMEOUT_SECONDS)
        return self._client

    def _get_headers(self) -> dict[str, str]:
        if not self.api_key:
            raise GatewayNotConfiguredError()
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _payload(self, messages: list[dict], stream: bool) -> dict:
        payload: dict[str, Any] = {"model": self.model, "messages": messages}
        if stream:
            payload["stream"] = True
        return payload

    async def complete(self, messages: list[dict]) -> Optional[str]:
        """
        Non-streaming completion.

        Returns ``choices[0].message.content`` or None if the gateway
        answered without one.

        Raises:
            RelayError: on transport failure or non-2xx status
        """
        headers = self._get_headers()

        try:
            response = await self.client.post(
                self.url,
                headers=headers,
                json=self._payload(messages, stream=False),
            )
        except httpx.TimeoutException:
            logger.error("AI gateway timeout")
            raise UpstreamError()
        except httpx.HTTPError as e:
            logger.error("AI gateway transport error: %s", e)
            raise UpstreamError()

        if not response.is_success:
            raise upstream_error(response.status_code, response.text)

        try:
            data = response.json()
        except ValueError:
            logger.error("AI gateway returned a non-JSON body")
            raise UpstreamError()

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return None
        return content or None

    async def open_stream(self, messages: list[dict]) -> httpx.Response:
        """
        Start a streaming completion.

        The returned response has not been read; relay
        ``response.aiter_bytes()`` and call ``response.aclose()`` when done.

        Raises:
            RelayError: on transport failure or non-2xx status (the
                response is closed before raising)
        """
        headers = self._get_headers()
        request = self.client.build_request(
            "POST",
            self.url,
            headers=headers,
            json=self._payload(messages, stream=True),
        )

        try:
            response = await self.client.send(request, stream=True)
        except httpx.HTTPError as e:
            logger.error("AI gateway transport error: %s", e)
            raise UpstreamError()

        if not response.is_success:
            body = await response.aread()
            await response.aclose()
            raise upstream_error(response.status_code, body.decode("utf-8", errors="replace"))

        return response

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


# Singleton instance
_ai_gateway: Optional[AIGatewayClient] = None


def get_ai_gateway() -> AIGatewayClient:
    """Get or create the gateway client (also used as a FastAPI dependency)."""
    global _ai_gateway

    if _ai_gateway is None:
        _ai_gateway = AIGatewayClient()

    return _ai_gateway


async def close_ai_gateway() -> None:
    global _ai_gateway

    if _ai_gateway is not None:
        await _ai_gateway.aclose()
        _ai_gateway = None
