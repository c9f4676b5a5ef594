"""Generation sources with scripted chunk streams."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Iterable

from chat_relay.errors import GenerationFailure
from chat_relay.state.transcript import Transcript


def frame(text: str) -> str:
    return f'data: {{"response": "{text}"}}\n'


DONE_FRAME = "data: [DONE]\n"


class ScriptedSource:
    """Replays canned chunk lists, one list per generation, recording each transcript."""

    def __init__(self, *scripts: Iterable[str | bytes]) -> None:
        self._scripts = [list(script) for script in scripts]
        self.transcripts: list[Transcript] = []
        self.closed = 0

    async def start(self, transcript: Transcript) -> AsyncIterator[str | bytes]:
        self.transcripts.append(transcript)
        chunks = self._scripts.pop(0) if self._scripts else []
        try:
            for chunk in chunks:
                await asyncio.sleep(0)
                yield chunk
        finally:
            self.closed += 1


class GatedSource:
    """Yields one chunk per `release()`; lets a test interleave inbound text with streaming."""

    def __init__(self, chunks: Iterable[str | bytes]) -> None:
        self._chunks = list(chunks)
        self._gate: asyncio.Queue[None] = asyncio.Queue()
        self.yielded = 0
        self.closed = asyncio.Event()
        self.transcripts: list[Transcript] = []

    def release(self, count: int = 1) -> None:
        for _ in range(count):
            self._gate.put_nowait(None)

    async def start(self, transcript: Transcript) -> AsyncIterator[str | bytes]:
        self.transcripts.append(transcript)
        try:
            for chunk in self._chunks:
                await self._gate.get()
                self.yielded += 1
                yield chunk
        finally:
            self.closed.set()


class FailingSource:
    def __init__(self, *, before: Iterable[str | bytes] = (), error: Exception | None = None) -> None:
        self._before = list(before)
        self._error = error or GenerationFailure("upstream unavailable", status_code=503)

    async def start(self, transcript: Transcript) -> AsyncIterator[str | bytes]:
        for chunk in self._before:
            await asyncio.sleep(0)
            yield chunk
        raise self._error


__all__ = ["DONE_FRAME", "FailingSource", "GatedSource", "ScriptedSource", "frame"]
