"""Outbound channel contract consumed by the session relay."""

from __future__ import annotations

from typing import Protocol


class OutboundChannel(Protocol):
    """Best-effort, non-blocking delivery of text frames to one client.

    `send` returns False when the frame could not be delivered; after that the
    channel reports `closed` and the relay treats the generation as cancelled.
    """

    @property
    def closed(self) -> bool: ...

    def send(self, text: str) -> bool: ...


__all__ = ["OutboundChannel"]
