"""Transcript backend selection."""

from __future__ import annotations

from pathlib import Path

from .file import FileTranscriptBackend
from .memory import MemoryTranscriptBackend
from .protocol import TranscriptBackend


def build_backend(name: str, *, directory: Path) -> TranscriptBackend:
    if name == "memory":
        return MemoryTranscriptBackend()
    if name == "file":
        return FileTranscriptBackend(directory)
    raise ValueError(f"unknown transcript backend: {name!r}")


__all__ = ["build_backend"]
