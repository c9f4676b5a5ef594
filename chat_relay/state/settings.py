"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from pathlib import Path
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LimitsSettings:
    max_concurrent_connections: int
    ws_message_window_seconds: float
    ws_max_messages_per_window: int
    ws_cancel_window_seconds: float
    ws_max_cancels_per_window: int


@dataclass(frozen=True, slots=True)
class WebSocketSettings:
    idle_timeout_s: float
    watchdog_tick_s: float
    max_connection_duration_s: float
    outbound_queue_max: int


@dataclass(frozen=True, slots=True)
class GenerationSettings:
    url: str
    api_token: str
    connect_timeout_s: float
    read_timeout_s: float | None
    max_buffer_chars: int
    failure_notice: str


@dataclass(frozen=True, slots=True)
class StorageSettings:
    backend: str
    directory: Path


@dataclass(frozen=True, slots=True)
class AppSettings:
    limits: LimitsSettings
    websocket: WebSocketSettings
    generation: GenerationSettings
    storage: StorageSettings


__all__ = [
    "AppSettings",
    "GenerationSettings",
    "LimitsSettings",
    "StorageSettings",
    "WebSocketSettings",
]
