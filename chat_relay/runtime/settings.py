"""Load runtime settings.

Configuration values are resolved from the environment in `chat_relay/config/*`
and exposed here as structured dataclasses for the rest of the server.
"""

from __future__ import annotations

from chat_relay.config.storage import TRANSCRIPT_DIR, TRANSCRIPT_BACKEND
from chat_relay.config.websocket import (
    WS_IDLE_TIMEOUT_S,
    WS_WATCHDOG_TICK_S,
    WS_OUTBOUND_QUEUE_MAX,
    WS_MAX_CONNECTION_DURATION_S,
)
from chat_relay.state.settings import (
    AppSettings,
    LimitsSettings,
    StorageSettings,
    WebSocketSettings,
    GenerationSettings,
)
from chat_relay.config.limits import (
    WS_CANCEL_WINDOW_SECONDS,
    WS_MAX_CANCELS_PER_WINDOW,
    WS_MESSAGE_WINDOW_SECONDS,
    MAX_CONCURRENT_CONNECTIONS,
    WS_MAX_MESSAGES_PER_WINDOW,
)
from chat_relay.config.generation import (
    GENERATION_URL,
    RELAY_FAILURE_NOTICE,
    GENERATION_API_TOKEN,
    DECODER_MAX_BUFFER_CHARS,
    GENERATION_READ_TIMEOUT_S,
    GENERATION_CONNECT_TIMEOUT_S,
)


def load_settings() -> AppSettings:
    return AppSettings(
        limits=LimitsSettings(
            max_concurrent_connections=MAX_CONCURRENT_CONNECTIONS,
            ws_message_window_seconds=WS_MESSAGE_WINDOW_SECONDS,
            ws_max_messages_per_window=WS_MAX_MESSAGES_PER_WINDOW,
            ws_cancel_window_seconds=WS_CANCEL_WINDOW_SECONDS,
            ws_max_cancels_per_window=WS_MAX_CANCELS_PER_WINDOW,
        ),
        websocket=WebSocketSettings(
            idle_timeout_s=WS_IDLE_TIMEOUT_S,
            watchdog_tick_s=WS_WATCHDOG_TICK_S,
            max_connection_duration_s=WS_MAX_CONNECTION_DURATION_S,
            outbound_queue_max=WS_OUTBOUND_QUEUE_MAX,
        ),
        generation=GenerationSettings(
            url=GENERATION_URL,
            api_token=GENERATION_API_TOKEN,
            connect_timeout_s=GENERATION_CONNECT_TIMEOUT_S,
            read_timeout_s=GENERATION_READ_TIMEOUT_S,
            max_buffer_chars=DECODER_MAX_BUFFER_CHARS,
            failure_notice=RELAY_FAILURE_NOTICE,
        ),
        storage=StorageSettings(
            backend=TRANSCRIPT_BACKEND,
            directory=TRANSCRIPT_DIR,
        ),
    )


__all__ = ["load_settings"]
