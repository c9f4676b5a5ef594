"""Configuration module exports (env-resolved constants only)."""

from .limits import (
    MAX_CONCURRENT_CONNECTIONS,
)
from .websocket import (
    WS_STOP_SENTINELS,
    WS_TURN_ENDED_SENTINEL,
)

__all__ = [
    "MAX_CONCURRENT_CONNECTIONS",
    "WS_STOP_SENTINELS",
    "WS_TURN_ENDED_SENTINEL",
]
