"""Incremental decoder for newline-delimited `data:` event streams.

The generation backend streams frames such as::

    data: {"response": "hel"}
    data: {"response": "lo"}
    data: [DONE]

Chunks arrive with arbitrary sizes, so a frame may be split anywhere,
including inside a multi-byte UTF-8 character or inside the JSON payload.
The decoder keeps the unresolved tail in a carry-over buffer and only looks
at complete lines.
"""

from __future__ import annotations

import codecs
import logging
from collections.abc import Callable, AsyncIterable, AsyncIterator
from dataclasses import dataclass

import orjson

from chat_relay.errors import DecodeIncomplete, FrameBufferOverflow

logger = logging.getLogger(__name__)

FRAME_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"
RESPONSE_FIELD = "response"


@dataclass(frozen=True, slots=True)
class DecodedEvent:
    payload: str = ""
    terminal: bool = False


TERMINAL = DecodedEvent(terminal=True)


def parse_payload(payload: str) -> str:
    """Extract the `response` text from one frame payload.

    Raises `DecodeIncomplete` when the payload is not valid JSON yet.
    """
    try:
        record = orjson.loads(payload)
    except orjson.JSONDecodeError as exc:
        raise DecodeIncomplete(str(exc)) from exc
    if not isinstance(record, dict):
        return ""
    response = record.get(RESPONSE_FIELD)
    return response if isinstance(response, str) else ""


class FrameDecoder:
    """Turns raw chunks into decoded events; one instance per generation."""

    def __init__(self, *, max_buffer_chars: int = 0) -> None:
        self._max_buffer_chars = max(0, int(max_buffer_chars))
        self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self._finished = False

    @property
    def buffered(self) -> str:
        return self._buffer

    @property
    def finished(self) -> bool:
        return self._finished

    def _to_text(self, chunk: str | bytes) -> str:
        if isinstance(chunk, str):
            return chunk
        return self._utf8.decode(bytes(chunk))

    def feed(self, chunk: str | bytes) -> list[DecodedEvent]:
        """Consume one chunk and return the events it completes, in order.

        After a terminal marker the decoder is finished and ignores further
        input.
        """
        if self._finished:
            return []

        self._buffer += self._to_text(chunk)
        lines = self._buffer.split("\n")
        self._buffer = lines.pop()

        events: list[DecodedEvent] = []
        unresolved: list[str] = []
        for line in lines:
            if not line.startswith(FRAME_PREFIX):
                continue
            payload = line[len(FRAME_PREFIX) :].strip()
            if not payload:
                continue
            if payload == DONE_SENTINEL:
                events.append(TERMINAL)
                unresolved.clear()
                self._buffer = ""
                self._finished = True
                break
            try:
                text = parse_payload(payload)
            except DecodeIncomplete:
                unresolved.append(line)
                continue
            if text:
                events.append(DecodedEvent(payload=text))

        if unresolved:
            # Put unparsed lines back ahead of newer data so a later chunk can complete them.
            self._buffer = "\n".join(unresolved) + "\n" + self._buffer

        if self._max_buffer_chars and len(self._buffer) > self._max_buffer_chars:
            raise FrameBufferOverflow.exceeded(len(self._buffer), self._max_buffer_chars)
        return events


async def decode_stream(
    chunks: AsyncIterable[str | bytes],
    *,
    decoder: FrameDecoder | None = None,
    should_stop: Callable[[], bool] | None = None,
) -> AsyncIterator[DecodedEvent]:
    """Lazily decode `chunks`, ending at end-of-data or after the terminal marker.

    `should_stop` is polled before every chunk read; when it returns True the
    stream ends without reading further.
    """
    decoder = decoder or FrameDecoder()
    iterator = aiter(chunks)
    try:
        while True:
            if should_stop is not None and should_stop():
                return
            try:
                chunk = await anext(iterator)
            except StopAsyncIteration:
                if decoder.buffered:
                    logger.debug("stream ended with %d unresolved chars", len(decoder.buffered))
                return
            for event in decoder.feed(chunk):
                yield event
                if event.terminal:
                    return
    finally:
        aclose = getattr(iterator, "aclose", None)
        if aclose is not None:
            await aclose()


__all__ = [
    "DONE_SENTINEL",
    "DecodedEvent",
    "FRAME_PREFIX",
    "FrameDecoder",
    "TERMINAL",
    "decode_stream",
    "parse_payload",
]
