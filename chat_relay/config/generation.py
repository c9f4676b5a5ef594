"""Generation backend and stream decoding settings (env-resolved constants only)."""

from __future__ import annotations

import os

_DISABLED_VALUES = {"0", "none", "null", "disabled", "disable", "off", "false"}


def _get_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return float(default)
    try:
        return float(raw)
    except Exception:
        return float(default)


def _get_optional_float(name: str) -> float | None:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw or raw in _DISABLED_VALUES:
        return None
    try:
        value = float(raw)
    except Exception:
        return None
    return value if value > 0 else None


GENERATION_URL: str = (os.getenv("GENERATION_URL") or "").strip() or "http://127.0.0.1:8080/generate"

# Sent as a bearer token when set.
GENERATION_API_TOKEN: str = (os.getenv("GENERATION_API_TOKEN") or "").strip()

GENERATION_CONNECT_TIMEOUT_S: float = max(0.1, _get_float("GENERATION_CONNECT_TIMEOUT_S", 10.0))

# No read timeout by default: a generation may pause between tokens for as long as the backend needs.
GENERATION_READ_TIMEOUT_S: float | None = _get_optional_float("GENERATION_READ_TIMEOUT_S")

# Upper bound on unresolved stream text held by the frame decoder. 0 disables the bound.
_MAX_BUFFER_RAW = (os.getenv("DECODER_MAX_BUFFER_CHARS") or "").strip()
if _MAX_BUFFER_RAW.lower() in _DISABLED_VALUES:
    DECODER_MAX_BUFFER_CHARS: int = 0
else:
    try:
        DECODER_MAX_BUFFER_CHARS = int(_MAX_BUFFER_RAW) if _MAX_BUFFER_RAW else 1024 * 1024
    except Exception:
        DECODER_MAX_BUFFER_CHARS = 1024 * 1024
    DECODER_MAX_BUFFER_CHARS = max(0, int(DECODER_MAX_BUFFER_CHARS))

RELAY_FAILURE_NOTICE: str = os.getenv("RELAY_FAILURE_NOTICE") or "AI request failed"

__all__ = [
    "DECODER_MAX_BUFFER_CHARS",
    "GENERATION_API_TOKEN",
    "GENERATION_CONNECT_TIMEOUT_S",
    "GENERATION_READ_TIMEOUT_S",
    "GENERATION_URL",
    "RELAY_FAILURE_NOTICE",
]
