"""Per-session relay state (tagged Idle / Generating values).

A session is Idle when no generation is in flight. Generating carries
everything that belongs to exactly one generation attempt: its cancellation
token, the outbound channel that receives its tokens, the accumulated text
not yet committed, and the pump task driving it. The relay replaces the whole
value on every transition rather than toggling fields in place.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Literal, Union
from dataclasses import field, dataclass

if TYPE_CHECKING:
    from chat_relay.session.outbound import OutboundChannel
    from chat_relay.session.cancellation import CancellationToken


@dataclass(frozen=True, slots=True)
class Idle:
    kind: Literal["idle"] = "idle"


@dataclass(slots=True)
class Generating:
    token: CancellationToken
    outbound: OutboundChannel
    accumulator: list[str] = field(default_factory=list)
    task: asyncio.Task | None = None
    abandoned: bool = False
    kind: Literal["generating"] = "generating"

    def accumulated_text(self) -> str:
        return "".join(self.accumulator)


SessionState = Union[Idle, Generating]

IDLE = Idle()


__all__ = ["IDLE", "Generating", "Idle", "SessionState"]
