"""Generation source contract."""

from __future__ import annotations

from typing import Protocol
from collections.abc import AsyncIterator

from chat_relay.state.transcript import Transcript


class GenerationSource(Protocol):
    """Starts one streaming generation for a transcript.

    The returned iterator yields raw event-stream chunks (text or bytes) until
    the backend ends the stream. Failures raise `GenerationFailure`.
    """

    def start(self, transcript: Transcript) -> AsyncIterator[str | bytes]: ...


__all__ = ["GenerationSource"]
