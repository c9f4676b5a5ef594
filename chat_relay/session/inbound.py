"""Inbound client text interpretation."""

from __future__ import annotations

from dataclasses import dataclass

from chat_relay.config.websocket import WS_STOP_SENTINELS


@dataclass(frozen=True, slots=True)
class InboundMessage:
    text: str
    is_stop: bool

    @property
    def is_empty(self) -> bool:
        return not self.is_stop and not self.text


def parse_inbound(raw: str | None) -> InboundMessage:
    text = (raw or "").strip()
    return InboundMessage(text=text, is_stop=text in WS_STOP_SENTINELS)


__all__ = ["InboundMessage", "parse_inbound"]
