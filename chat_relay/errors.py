"""Shared error types for the chat relay server (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RateLimitError(Exception):
    """Raised when a sliding-window rate limiter is saturated."""

    retry_in: float
    limit: int
    window_seconds: float


@dataclass(frozen=True, slots=True)
class StorageUnavailable(Exception):
    """Raised when the transcript backend cannot be read or written."""

    reason: str

    def __str__(self) -> str:
        return self.reason


@dataclass(frozen=True, slots=True)
class GenerationFailure(Exception):
    """Raised when the generation source fails for a reason other than cancellation."""

    reason: str
    status_code: int | None = None

    def __str__(self) -> str:
        return self.reason


@dataclass(frozen=True, slots=True)
class FrameBufferOverflow(GenerationFailure):
    """Raised when unresolved stream text exceeds the decoder's buffer bound."""

    buffered: int = 0
    limit: int = 0

    @classmethod
    def exceeded(cls, buffered: int, limit: int) -> FrameBufferOverflow:
        return cls(
            reason=f"stream carry-over buffer exceeded {limit} chars ({buffered} buffered)",
            buffered=buffered,
            limit=limit,
        )


@dataclass(frozen=True, slots=True)
class DecodeIncomplete(ValueError):
    """A frame payload could not be parsed yet; recovered by re-buffering."""

    reason: str

    def __str__(self) -> str:
        return self.reason


__all__ = [
    "DecodeIncomplete",
    "FrameBufferOverflow",
    "GenerationFailure",
    "RateLimitError",
    "StorageUnavailable",
]
