"""Per-generation cancellation tokens.

Cancellation is cooperative: signaling a token only flips a flag that the
relay's pump polls before each decoded event and before each chunk read. A
token belongs to exactly one generation; once that generation completes,
further signals are ignored.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass


@dataclass(slots=True)
class CancellationToken:
    generation_id: int
    signaled: bool = False
    completed: bool = False


class CancellationCoordinator:
    """Mints tokens and applies one-way, idempotent transitions to them."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)

    def begin(self) -> CancellationToken:
        return CancellationToken(next(self._ids))

    def signal(self, token: CancellationToken) -> bool:
        """Signal `token`; returns True only on the Idle -> Signaled transition."""
        if token.completed or token.signaled:
            return False
        token.signaled = True
        return True

    def is_signaled(self, token: CancellationToken) -> bool:
        return token.signaled

    def complete(self, token: CancellationToken) -> None:
        token.completed = True


__all__ = ["CancellationCoordinator", "CancellationToken"]
