"""Session key derivation for chat sockets and the history endpoint."""

from __future__ import annotations

from typing import Any

from chat_relay.config.websocket import WS_QUERY_SESSION_KEY


def get_session_key(conn: Any) -> str | None:
    # Works for both starlette WebSocket and Request (both expose query_params).
    key = (conn.query_params.get(WS_QUERY_SESSION_KEY) or "").strip()
    return key or None


__all__ = ["get_session_key"]
