"""Transcript lookup for the history endpoint."""

from __future__ import annotations

import logging

from chat_relay.errors import StorageUnavailable
from chat_relay.storage.store import TranscriptStore
from chat_relay.state.transcript import transcript_to_records

logger = logging.getLogger(__name__)


async def read_history(store: TranscriptStore, session_key: str) -> list[dict[str, str]]:
    try:
        transcript = await store.read(session_key)
    except StorageUnavailable:
        logger.warning("session=%s history unavailable; returning empty history", session_key, exc_info=True)
        return []
    return transcript_to_records(transcript)


__all__ = ["read_history"]
