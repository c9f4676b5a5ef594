"""Rate limiting for inbound chat-socket text."""

from __future__ import annotations

import math
import logging

from chat_relay.errors import RateLimitError
from chat_relay.session.inbound import InboundMessage
from chat_relay.session.outbound import OutboundChannel
from chat_relay.config.websocket import WS_TURN_ENDED_SENTINEL
from chat_relay.handlers.limits import SlidingWindowRateLimiter

logger = logging.getLogger(__name__)


def select_rate_limiter(
    message: InboundMessage,
    message_limiter: SlidingWindowRateLimiter,
    cancel_limiter: SlidingWindowRateLimiter,
) -> tuple[SlidingWindowRateLimiter | None, str]:
    if message.is_stop:
        return cancel_limiter, "stop"
    if message.is_empty:
        return None, ""
    return message_limiter, "message"


def consume_limiter(
    limiter: SlidingWindowRateLimiter,
    label: str,
    *,
    outbound: OutboundChannel,
    notify: bool,
) -> bool:
    """Consume one slot; on saturation optionally tell the client and return False.

    The notice is followed by the turn-ended sentinel so a client waiting for a
    reply stops waiting. Callers pass notify=False while a generation is
    streaming to the same client, where extra text would corrupt the reply.
    """
    try:
        limiter.consume()
    except RateLimitError as exc:
        retry_in_s = int(max(1, math.ceil(float(exc.retry_in)))) if exc.retry_in else 1
        logger.info(
            "%s rate limit hit: %s per %ss; retry in %ss",
            label,
            limiter.limit,
            int(limiter.window_seconds),
            retry_in_s,
        )
        if notify:
            outbound.send(
                f"{label} rate limit: at most {limiter.limit} per {int(limiter.window_seconds)} seconds; "
                f"retry in {retry_in_s} seconds"
            )
            outbound.send(WS_TURN_ENDED_SENTINEL)
        return False
    return True


__all__ = ["consume_limiter", "select_rate_limiter"]
