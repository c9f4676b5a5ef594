"""Process-local transcript backend."""

from __future__ import annotations

from chat_relay.state.transcript import EMPTY_TRANSCRIPT, Transcript


class MemoryTranscriptBackend:
    """Durable only for the lifetime of the process."""

    def __init__(self) -> None:
        self._data: dict[str, Transcript] = {}

    async def read(self, key: str) -> Transcript:
        return self._data.get(key, EMPTY_TRANSCRIPT)

    async def write(self, key: str, transcript: Transcript) -> None:
        self._data[key] = tuple(transcript)


__all__ = ["MemoryTranscriptBackend"]
