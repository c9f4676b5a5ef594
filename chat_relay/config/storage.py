"""Transcript storage configuration (env-resolved constants only)."""

from __future__ import annotations

import os
from pathlib import Path

TRANSCRIPT_BACKENDS = frozenset({"file", "memory"})

TRANSCRIPT_BACKEND: str = (os.getenv("TRANSCRIPT_BACKEND") or "").strip().lower() or "file"
if TRANSCRIPT_BACKEND not in TRANSCRIPT_BACKENDS:
    raise ValueError(f"TRANSCRIPT_BACKEND must be one of {sorted(TRANSCRIPT_BACKENDS)}, got {TRANSCRIPT_BACKEND!r}")

_TRANSCRIPT_DIR_RAW = (os.getenv("TRANSCRIPT_DIR") or "").strip()
TRANSCRIPT_DIR: Path = Path(_TRANSCRIPT_DIR_RAW).expanduser() if _TRANSCRIPT_DIR_RAW else (Path("data") / "transcripts")

__all__ = [
    "TRANSCRIPT_BACKEND",
    "TRANSCRIPT_BACKENDS",
    "TRANSCRIPT_DIR",
]
