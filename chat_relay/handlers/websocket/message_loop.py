"""Chat socket receive loop feeding the session relay."""

from __future__ import annotations

import asyncio
import logging

from fastapi import WebSocket, WebSocketDisconnect

from chat_relay.session.relay import SessionRelay
from chat_relay.session.inbound import parse_inbound
from chat_relay.session.outbound import OutboundChannel
from chat_relay.handlers.limits import SlidingWindowRateLimiter
from chat_relay.config.websocket import WS_TURN_ENDED_SENTINEL, WS_MESSAGE_SESSION_BUSY

from .lifecycle import WebSocketLifecycle
from .limits import consume_limiter, select_rate_limiter

logger = logging.getLogger(__name__)


async def _recv_text_with_watchdog(ws: WebSocket, lifecycle: WebSocketLifecycle) -> tuple[str | None, bool]:
    try:
        message = await asyncio.wait_for(
            ws.receive(),
            timeout=lifecycle.tick_s * 2,
        )
    except TimeoutError:
        return None, lifecycle.should_close()

    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(message.get("code", 1000), message.get("reason"))
    text = message.get("text")
    if text is None:
        # Plain-text protocol: binary frames are dropped.
        logger.debug("ignoring non-text WebSocket frame")
        return None, False
    return text, False


async def _dispatch(
    raw: str,
    *,
    relay: SessionRelay,
    outbound: OutboundChannel,
    message_limiter: SlidingWindowRateLimiter,
    cancel_limiter: SlidingWindowRateLimiter,
) -> None:
    message = parse_inbound(raw)

    limiter, label = select_rate_limiter(message, message_limiter, cancel_limiter)
    if limiter is not None:
        notify = not message.is_stop and not relay.is_generating_for(outbound)
        if not consume_limiter(limiter, label, outbound=outbound, notify=notify):
            return

    outcome = await relay.handle_inbound(raw, outbound)
    if outcome != "busy":
        return
    if relay.is_generating_for(outbound):
        # The client is already receiving a reply on this socket; drop the message silently.
        return
    outbound.send(WS_MESSAGE_SESSION_BUSY)
    outbound.send(WS_TURN_ENDED_SENTINEL)


async def run_message_loop(
    ws: WebSocket,
    lifecycle: WebSocketLifecycle,
    relay: SessionRelay,
    outbound: OutboundChannel,
    message_limiter: SlidingWindowRateLimiter,
    cancel_limiter: SlidingWindowRateLimiter,
) -> None:
    try:
        while not lifecycle.should_close():
            raw, should_exit = await _recv_text_with_watchdog(ws, lifecycle)
            if should_exit:
                return
            if raw is None:
                continue

            lifecycle.touch()
            await _dispatch(
                raw,
                relay=relay,
                outbound=outbound,
                message_limiter=message_limiter,
                cancel_limiter=cancel_limiter,
            )
    except WebSocketDisconnect:
        return
    finally:
        await relay.handle_closed(outbound)


__all__ = ["run_message_loop"]
