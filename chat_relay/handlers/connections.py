"""Chat socket admission control."""

from __future__ import annotations

import asyncio
from typing import Any
from collections import Counter


class ConnectionManager:
    """Caps concurrent chat sockets and tracks how many each session key holds."""

    def __init__(self, *, max_connections: int) -> None:
        self._max = max(1, int(max_connections))
        self._lock = asyncio.Lock()
        self._active: dict[int, str] = {}
        self._per_session: Counter[str] = Counter()

    async def connect(self, ws: Any, session_key: str) -> bool:
        """Attempt to admit a websocket connection (without accepting it)."""
        key = id(ws)
        async with self._lock:
            if key in self._active:
                return True
            if len(self._active) >= self._max:
                return False
            self._active[key] = session_key
            self._per_session[session_key] += 1
            return True

    async def disconnect(self, ws: Any) -> None:
        key = id(ws)
        async with self._lock:
            session_key = self._active.pop(key, None)
            if session_key is None:
                return
            self._per_session[session_key] -= 1
            if self._per_session[session_key] <= 0:
                del self._per_session[session_key]

    def get_connection_count(self) -> int:
        return len(self._active)

    def get_session_connection_count(self, session_key: str) -> int:
        return self._per_session.get(session_key, 0)


__all__ = ["ConnectionManager"]
