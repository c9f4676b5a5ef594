"""Logging configuration (env-resolved constants only)."""

from __future__ import annotations

import os

LOG_LEVEL: str = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
LOG_FORMAT: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# httpx logs every request line at INFO. Keep it tame unless explicitly enabled.
SHOW_HTTPX_LOGS: bool = (os.getenv("SHOW_HTTPX_LOGS") or "").strip().lower() in {"1", "true", "yes"}

__all__ = ["LOG_FORMAT", "LOG_LEVEL", "SHOW_HTTPX_LOGS"]
