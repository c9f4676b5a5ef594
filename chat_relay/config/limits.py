"""Admission control and rate limit configuration (env-resolved constants only)."""

from __future__ import annotations

import os

_MAX_CONCURRENT_CONNECTIONS_RAW = (os.getenv("MAX_CONCURRENT_CONNECTIONS") or "").strip()
try:
    MAX_CONCURRENT_CONNECTIONS: int = int(_MAX_CONCURRENT_CONNECTIONS_RAW) if _MAX_CONCURRENT_CONNECTIONS_RAW else 100
except Exception:
    MAX_CONCURRENT_CONNECTIONS = 100
MAX_CONCURRENT_CONNECTIONS = max(1, int(MAX_CONCURRENT_CONNECTIONS))

_WS_MESSAGE_WINDOW_SECONDS_RAW = (os.getenv("WS_MESSAGE_WINDOW_SECONDS") or "").strip()
try:
    WS_MESSAGE_WINDOW_SECONDS: float = float(_WS_MESSAGE_WINDOW_SECONDS_RAW) if _WS_MESSAGE_WINDOW_SECONDS_RAW else 60.0
except Exception:
    WS_MESSAGE_WINDOW_SECONDS = 60.0
if WS_MESSAGE_WINDOW_SECONDS <= 0:
    WS_MESSAGE_WINDOW_SECONDS = 60.0

# Each chat message starts a full generation, so keep this far below a streaming-audio style limit.
_WS_MAX_MESSAGES_PER_WINDOW_RAW = (os.getenv("WS_MAX_MESSAGES_PER_WINDOW") or "").strip()
try:
    WS_MAX_MESSAGES_PER_WINDOW: int = int(_WS_MAX_MESSAGES_PER_WINDOW_RAW) if _WS_MAX_MESSAGES_PER_WINDOW_RAW else 30
except Exception:
    WS_MAX_MESSAGES_PER_WINDOW = 30
WS_MAX_MESSAGES_PER_WINDOW = max(1, int(WS_MAX_MESSAGES_PER_WINDOW))

_WS_CANCEL_WINDOW_SECONDS_RAW = (os.getenv("WS_CANCEL_WINDOW_SECONDS") or "").strip()
try:
    WS_CANCEL_WINDOW_SECONDS: float = float(_WS_CANCEL_WINDOW_SECONDS_RAW) if _WS_CANCEL_WINDOW_SECONDS_RAW else 0.0
except Exception:
    WS_CANCEL_WINDOW_SECONDS = 0.0
if WS_CANCEL_WINDOW_SECONDS <= 0:
    WS_CANCEL_WINDOW_SECONDS = float(WS_MESSAGE_WINDOW_SECONDS)

_WS_MAX_CANCELS_PER_WINDOW_RAW = (os.getenv("WS_MAX_CANCELS_PER_WINDOW") or "").strip()
try:
    WS_MAX_CANCELS_PER_WINDOW: int = int(_WS_MAX_CANCELS_PER_WINDOW_RAW) if _WS_MAX_CANCELS_PER_WINDOW_RAW else 30
except Exception:
    WS_MAX_CANCELS_PER_WINDOW = 30
WS_MAX_CANCELS_PER_WINDOW = max(0, int(WS_MAX_CANCELS_PER_WINDOW))

__all__ = [
    "MAX_CONCURRENT_CONNECTIONS",
    "WS_CANCEL_WINDOW_SECONDS",
    "WS_MAX_CANCELS_PER_WINDOW",
    "WS_MAX_MESSAGES_PER_WINDOW",
    "WS_MESSAGE_WINDOW_SECONDS",
]
