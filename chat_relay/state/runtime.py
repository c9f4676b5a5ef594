"""Typed runtime state objects for dependency wiring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from chat_relay.state.settings import AppSettings
    from chat_relay.storage.store import TranscriptStore
    from chat_relay.session.registry import SessionRegistry
    from chat_relay.handlers.connections import ConnectionManager


@dataclass(slots=True)
class RuntimeDeps:
    connections: ConnectionManager
    sessions: SessionRegistry
    transcripts: TranscriptStore
    settings: AppSettings
    _resource_stack: Any

    async def shutdown(self) -> None:
        try:
            await self.sessions.aclose()
        except Exception:
            logger.exception("session shutdown failed")
        try:
            await self._resource_stack.aclose()
        except Exception:
            logger.exception("runtime shutdown failed")


__all__ = ["RuntimeDeps"]
