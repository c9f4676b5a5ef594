"""WebSocket protocol configuration and constants."""

from __future__ import annotations

import os

WS_ENDPOINT_PATH = "/chat"
HISTORY_ENDPOINT_PATH = "/history"

# Query parameter carrying the opaque session key.
WS_QUERY_SESSION_KEY = "user"

# Plain-text protocol markers
WS_STOP_SENTINELS = frozenset({"_STOP_", "__STOP__"})
WS_TURN_ENDED_SENTINEL = "\n"

# Close codes
WS_CLOSE_CLIENT_REQUEST_CODE = 1000
WS_CLOSE_BUSY_CODE = 4002
WS_CLOSE_IDLE_CODE = 4000
WS_CLOSE_MAX_DURATION_CODE = 4003
WS_CLOSE_MISSING_SESSION_KEY_CODE = 4400

WS_CLOSE_IDLE_REASON = "idle timeout"
WS_CLOSE_MAX_DURATION_REASON = "max connection duration reached"

# Idle watchdog
WS_IDLE_TIMEOUT_S = float(os.getenv("WS_IDLE_TIMEOUT_S", "150"))
WS_WATCHDOG_TICK_S = float(os.getenv("WS_WATCHDOG_TICK_S", "5"))
WS_MAX_CONNECTION_DURATION_S = float(os.getenv("WS_MAX_CONNECTION_DURATION_S", "3600"))

_WS_OUTBOUND_QUEUE_MAX_RAW = (os.getenv("WS_OUTBOUND_QUEUE_MAX") or "").strip()
try:
    WS_OUTBOUND_QUEUE_MAX: int = int(_WS_OUTBOUND_QUEUE_MAX_RAW) if _WS_OUTBOUND_QUEUE_MAX_RAW else 1024
except Exception:
    WS_OUTBOUND_QUEUE_MAX = 1024
WS_OUTBOUND_QUEUE_MAX = max(1, int(WS_OUTBOUND_QUEUE_MAX))

# Client-visible rejection messages
WS_MESSAGE_MISSING_SESSION_KEY = "Missing user ID"
WS_MESSAGE_SERVER_AT_CAPACITY = "Server cannot accept new connections. Please try again later."
WS_MESSAGE_SESSION_BUSY = "Another reply is still in progress for this session."

__all__ = [
    "HISTORY_ENDPOINT_PATH",
    "WS_CLOSE_BUSY_CODE",
    "WS_CLOSE_CLIENT_REQUEST_CODE",
    "WS_CLOSE_IDLE_CODE",
    "WS_CLOSE_IDLE_REASON",
    "WS_CLOSE_MAX_DURATION_CODE",
    "WS_CLOSE_MAX_DURATION_REASON",
    "WS_CLOSE_MISSING_SESSION_KEY_CODE",
    "WS_ENDPOINT_PATH",
    "WS_IDLE_TIMEOUT_S",
    "WS_MAX_CONNECTION_DURATION_S",
    "WS_MESSAGE_MISSING_SESSION_KEY",
    "WS_MESSAGE_SERVER_AT_CAPACITY",
    "WS_MESSAGE_SESSION_BUSY",
    "WS_OUTBOUND_QUEUE_MAX",
    "WS_QUERY_SESSION_KEY",
    "WS_STOP_SENTINELS",
    "WS_TURN_ENDED_SENTINEL",
    "WS_WATCHDOG_TICK_S",
]
