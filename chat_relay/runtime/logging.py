"""Logging initialization."""

from __future__ import annotations

import logging

from chat_relay.config.logging import LOG_LEVEL, LOG_FORMAT, SHOW_HTTPX_LOGS


def configure_logging() -> None:
    if not SHOW_HTTPX_LOGS:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)


__all__ = ["configure_logging"]
