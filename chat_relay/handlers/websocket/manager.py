"""Primary chat socket connection handler orchestration."""

from __future__ import annotations

import logging
import contextlib

from fastapi import WebSocket

from chat_relay.state import RuntimeDeps
from chat_relay.handlers.limits import SlidingWindowRateLimiter
from chat_relay.config.websocket import (
    WS_CLOSE_BUSY_CODE,
    WS_MESSAGE_SERVER_AT_CAPACITY,
    WS_MESSAGE_MISSING_SESSION_KEY,
    WS_CLOSE_MISSING_SESSION_KEY_CODE,
)

from .errors import reject_connection
from .outbound import WebSocketOutbound
from .lifecycle import WebSocketLifecycle
from .session_key import get_session_key
from .message_loop import run_message_loop

logger = logging.getLogger(__name__)


def _create_rate_limiters(runtime_deps: RuntimeDeps) -> tuple[SlidingWindowRateLimiter, SlidingWindowRateLimiter]:
    message_limiter = SlidingWindowRateLimiter(
        limit=runtime_deps.settings.limits.ws_max_messages_per_window,
        window_seconds=runtime_deps.settings.limits.ws_message_window_seconds,
    )
    cancel_limiter = SlidingWindowRateLimiter(
        limit=runtime_deps.settings.limits.ws_max_cancels_per_window,
        window_seconds=runtime_deps.settings.limits.ws_cancel_window_seconds,
    )
    return message_limiter, cancel_limiter


async def _prepare_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> str | None:
    session_key = get_session_key(ws)
    if session_key is None:
        await reject_connection(
            ws,
            message=WS_MESSAGE_MISSING_SESSION_KEY,
            close_code=WS_CLOSE_MISSING_SESSION_KEY_CODE,
        )
        return None

    if not await runtime_deps.connections.connect(ws, session_key):
        await reject_connection(
            ws,
            message=WS_MESSAGE_SERVER_AT_CAPACITY,
            close_code=WS_CLOSE_BUSY_CODE,
        )
        return None

    try:
        await ws.accept()
    except Exception:
        with contextlib.suppress(Exception):
            await runtime_deps.connections.disconnect(ws)
        raise
    return session_key


async def handle_websocket_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> None:
    lifecycle: WebSocketLifecycle | None = None
    outbound: WebSocketOutbound | None = None
    session_key: str | None = None
    try:
        session_key = await _prepare_connection(ws, runtime_deps)
        if session_key is None:
            return

        relay = await runtime_deps.sessions.get(session_key)
        settings = runtime_deps.settings.websocket

        lifecycle = WebSocketLifecycle(
            ws,
            is_busy_fn=lambda: outbound is not None and relay.is_generating_for(outbound),
            idle_timeout_s=settings.idle_timeout_s,
            watchdog_tick_s=settings.watchdog_tick_s,
            max_connection_duration_s=settings.max_connection_duration_s,
        )
        outbound = WebSocketOutbound(ws, queue_max=settings.outbound_queue_max, on_activity=lifecycle.touch)
        outbound.start()
        lifecycle.start()

        message_limiter, cancel_limiter = _create_rate_limiters(runtime_deps)

        logger.info(
            "WebSocket connection accepted session=%s (sockets for session: %s). Active: %s",
            session_key,
            runtime_deps.connections.get_session_connection_count(session_key),
            runtime_deps.connections.get_connection_count(),
        )
        await run_message_loop(ws, lifecycle, relay, outbound, message_limiter, cancel_limiter)
    finally:
        if lifecycle is not None:
            with contextlib.suppress(Exception):
                await lifecycle.stop()

        if outbound is not None:
            with contextlib.suppress(Exception):
                await outbound.aclose()

        if session_key is not None:
            with contextlib.suppress(Exception):
                await runtime_deps.connections.disconnect(ws)
            logger.info(
                "WebSocket connection closed session=%s. Active: %s",
                session_key,
                runtime_deps.connections.get_connection_count(),
            )


__all__ = ["handle_websocket_connection"]
