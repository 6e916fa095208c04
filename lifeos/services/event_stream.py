"""
Event Stream Parser
===================

Incremental parser for the ``text/event-stream`` body produced by
OpenAI-compatible chat completion endpoints (and relayed verbatim by the
life coach endpoint).

Bytes arrive in arbitrary chunks: a chunk may end in the middle of a line
or in the middle of a multi-byte UTF-8 sequence. The parser keeps both the
undecoded tail and the unterminated line between calls.

Example::

    parser = EventStreamParser()
    async for chunk in response.aiter_bytes():
        for delta in parser.feed(chunk):
            print(delta, end="")
        if parser.done:
            break
    parser.close()
"""

import codecs
import json
import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


def delta_content(event: Any) -> Optional[str]:
    """Return ``choices[0].delta.content`` if the event has one."""
    if not isinstance(event, dict):
        return None
    choices = event.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    delta = first.get("delta")
    if not isinstance(delta, dict):
        return None
    content = delta.get("content")
    return content if isinstance(content, str) else None


class EventStreamParser:
    """
    Accumulates assistant text from a chat completion event stream.

    Attributes:
        text: Concatenation of every content delta seen so far
        done: True once the ``[DONE]`` sentinel has been read; no further
            input is consumed after that
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self.text = ""
        self.done = False

    def feed(self, chunk: bytes) -> list[str]:
        """
        Consume one chunk of bytes and return the content deltas it completed.

        A ``data:`` line whose payload is not valid JSON is put back at the
        head of the buffer and processing of this chunk stops there; it is
        retried when the next chunk arrives.
        """
        if self.done:
            return []
        self._buffer += self._decoder.decode(chunk)
        return self._drain(final=False)

    def close(self) -> list[str]:
        """
        End of input: flush the decoder and process whatever is left,
        including a last line with no trailing newline.

        Payloads that still fail to parse at this point are dropped.
        """
        if self.done:
            return []
        self._buffer += self._decoder.decode(b"", final=True)
        return self._drain(final=True)

    def _drain(self, final: bool) -> list[str]:
        deltas: list[str] = []

        while not self.done:
            newline = self._buffer.find("\n")
            if newline == -1:
                if not final or not self._buffer:
                    break
                line, self._buffer = self._buffer, ""
            else:
                line = self._buffer[:newline]
                self._buffer = self._buffer[newline + 1:]

            if line.endswith("\r"):
                line = line[:-1]
            if line.startswith(":") or not line.strip():
                continue
            if not line.startswith(DATA_PREFIX):
                continue

            payload = line[len(DATA_PREFIX):].strip()
            if payload == DONE_SENTINEL:
                self.done = True
                break

            try:
                event = json.loads(payload)
            except ValueError:
                if final:
                    logger.debug("Dropping unparseable event payload: %.80s", payload)
                    continue
                self._buffer = line + "\n" + self._buffer
                break

            content = delta_content(event)
            if content:
                self.text += content
                deltas.append(content)

        return deltas
