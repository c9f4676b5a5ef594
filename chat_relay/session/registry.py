"""Lazily created session relays, one per session key."""

from __future__ import annotations

import asyncio
import logging

from chat_relay.storage.store import TranscriptStore
from chat_relay.generation.source import GenerationSource

from .relay import DEFAULT_FAILURE_NOTICE, SessionRelay

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Hands out the single relay for a session key, creating it on first use.

    Relays live for the lifetime of the process; sessions never see each other.
    """

    def __init__(
        self,
        *,
        store: TranscriptStore,
        source: GenerationSource,
        failure_notice: str = DEFAULT_FAILURE_NOTICE,
        max_buffer_chars: int = 0,
    ) -> None:
        self._store = store
        self._source = source
        self._failure_notice = failure_notice
        self._max_buffer_chars = max_buffer_chars
        self._lock = asyncio.Lock()
        self._relays: dict[str, SessionRelay] = {}

    async def get(self, key: str) -> SessionRelay:
        async with self._lock:
            relay = self._relays.get(key)
            if relay is not None:
                return relay
            relay = SessionRelay(
                key,
                store=self._store,
                source=self._source,
                failure_notice=self._failure_notice,
                max_buffer_chars=self._max_buffer_chars,
            )
            await relay.prime()
            self._relays[key] = relay
            logger.info("session=%s created. Sessions: %s", key, len(self._relays))
            return relay

    async def aclose(self) -> None:
        await asyncio.gather(*(relay.aclose() for relay in list(self._relays.values())))


__all__ = ["SessionRegistry"]
