"""Durable keyed storage contract for transcripts.

A backend persists one ordered list of turns per session key. It knows nothing
about sessions or generations: `read` returns whatever was last written and
`write` replaces it wholesale. Failures surface as `StorageUnavailable`.
"""

from __future__ import annotations

from typing import Protocol

from chat_relay.state.transcript import Transcript


class TranscriptBackend(Protocol):
    async def read(self, key: str) -> Transcript: ...

    async def write(self, key: str, transcript: Transcript) -> None: ...


__all__ = ["TranscriptBackend"]
