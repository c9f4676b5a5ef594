"""Transcript store: per-key in-memory transcripts in front of a durable backend."""

from __future__ import annotations

import logging

from chat_relay.errors import StorageUnavailable
from chat_relay.state.transcript import Turn, Transcript

from .protocol import TranscriptBackend

logger = logging.getLogger(__name__)


class TranscriptStore:
    """Ordered, append-only transcripts keyed by session key.

    The in-memory copy is authoritative for the running process. Every append
    lands in memory first and is then persisted as the full transcript, so a
    failed write still leaves the conversation intact for this process.

    A key is written only after its persisted transcript has been read once.
    Until then appends stay in memory and each one retries the read, so a
    transient read failure never overwrites earlier history with a shorter
    transcript.
    """

    def __init__(self, backend: TranscriptBackend) -> None:
        self._backend = backend
        self._turns: dict[str, list[Turn]] = {}
        self._loaded: set[str] = set()

    async def _read_backend(self, key: str) -> Transcript:
        try:
            return tuple(await self._backend.read(key))
        except StorageUnavailable:
            raise
        except Exception as exc:
            raise StorageUnavailable(f"transcript read failed for session: {exc}") from exc

    async def _ensure_loaded(self, key: str) -> list[Turn]:
        turns = self._turns.setdefault(key, [])
        if key in self._loaded:
            return turns
        persisted = await self._read_backend(key)
        # Another load may have finished while this read was in flight.
        if key not in self._loaded:
            turns[:0] = persisted
            self._loaded.add(key)
        return turns

    async def load(self, key: str) -> Transcript:
        """Return the transcript for `key`, reading the backend on first use.

        Raises `StorageUnavailable` when the backend cannot be read; the read
        is retried on the next call.
        """
        return tuple(await self._ensure_loaded(key))

    def cached(self, key: str) -> Transcript:
        """Turns held in memory for `key`, without touching the backend."""
        return tuple(self._turns.get(key, ()))

    async def append(self, key: str, turn: Turn) -> None:
        """Append one full turn and persist the whole transcript.

        Raises `StorageUnavailable` when the backend cannot be read or written;
        the turn is kept in memory regardless.
        """
        turns = self._turns.setdefault(key, [])
        turns.append(turn)
        turns = await self._ensure_loaded(key)
        snapshot = tuple(turns)
        try:
            await self._backend.write(key, snapshot)
        except StorageUnavailable:
            raise
        except Exception as exc:
            raise StorageUnavailable(f"transcript write failed for session: {exc}") from exc

    async def read(self, key: str) -> Transcript:
        """Current transcript for display.

        Keys not loaded yet are read from the backend, followed by any turns
        appended in memory meanwhile; nothing is cached.
        """
        if key in self._loaded:
            return tuple(self._turns[key])
        persisted = await self._read_backend(key)
        return persisted + self.cached(key)


__all__ = ["TranscriptStore"]
