from __future__ import annotations

import asyncio

import pytest

from chat_relay.config.websocket import (
    WS_CLOSE_IDLE_CODE,
    WS_CLOSE_MAX_DURATION_CODE,
    WS_CLOSE_MAX_DURATION_REASON,
)
from chat_relay.handlers.websocket.lifecycle import WebSocketLifecycle


class _FakeWebSocket:
    def __init__(self) -> None:
        self.closed = asyncio.Event()
        self.close_code: int | None = None
        self.close_reason: str | None = None

    async def close(self, *, code: int = 1000, reason: str | None = None) -> None:
        self.close_code = code
        self.close_reason = reason or ""
        self.closed.set()


@pytest.mark.asyncio
async def test_websocket_lifecycle_closes_on_max_duration() -> None:
    ws = _FakeWebSocket()
    lifecycle = WebSocketLifecycle(
        ws,
        idle_timeout_s=9999.0,
        watchdog_tick_s=0.01,
        max_connection_duration_s=0.05,
    )
    lifecycle.start()

    await asyncio.wait_for(ws.closed.wait(), timeout=1.0)
    assert ws.close_code == WS_CLOSE_MAX_DURATION_CODE
    assert ws.close_reason == WS_CLOSE_MAX_DURATION_REASON
    assert lifecycle.should_close()

    await lifecycle.stop()


@pytest.mark.asyncio
async def test_websocket_lifecycle_closes_idle_connection() -> None:
    ws = _FakeWebSocket()
    lifecycle = WebSocketLifecycle(
        ws,
        idle_timeout_s=0.03,
        watchdog_tick_s=0.01,
        max_connection_duration_s=0,
    )
    lifecycle.start()

    await asyncio.wait_for(ws.closed.wait(), timeout=1.0)
    assert ws.close_code == WS_CLOSE_IDLE_CODE

    await lifecycle.stop()


@pytest.mark.asyncio
async def test_busy_connection_is_never_idle() -> None:
    busy = True
    lifecycle = WebSocketLifecycle(
        _FakeWebSocket(),
        is_busy_fn=lambda: busy,
        idle_timeout_s=1.0,
        watchdog_tick_s=1.0,
        max_connection_duration_s=100.0,
    )
    later = lifecycle._last_activity + 50.0

    assert lifecycle._expired(later) is None
    busy = False
    assert lifecycle._expired(later)[0] == WS_CLOSE_IDLE_CODE
    assert lifecycle._expired(later + 100.0)[0] == WS_CLOSE_MAX_DURATION_CODE


@pytest.mark.asyncio
async def test_touch_resets_idle_clock() -> None:
    lifecycle = WebSocketLifecycle(
        _FakeWebSocket(),
        idle_timeout_s=10.0,
        watchdog_tick_s=1.0,
        max_connection_duration_s=0,
    )
    lifecycle._last_activity -= 20.0
    lifecycle.touch()
    assert lifecycle._expired(lifecycle._last_activity + 1.0) is None
