"""HTTP listener configuration (env-resolved constants only)."""

from __future__ import annotations

import os

SERVER_HOST: str = (os.getenv("SERVER_HOST") or "").strip() or "0.0.0.0"

_SERVER_PORT_RAW = (os.getenv("SERVER_PORT") or "").strip()
try:
    SERVER_PORT: int = int(_SERVER_PORT_RAW) if _SERVER_PORT_RAW else 8000
except Exception:
    SERVER_PORT = 8000

__all__ = ["SERVER_HOST", "SERVER_PORT"]
