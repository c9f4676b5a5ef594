from .relay import InboundOutcome, SessionRelay
from .inbound import InboundMessage, parse_inbound
from .outbound import OutboundChannel
from .registry import SessionRegistry
from .cancellation import CancellationToken, CancellationCoordinator

__all__ = [
    "CancellationCoordinator",
    "CancellationToken",
    "InboundMessage",
    "InboundOutcome",
    "OutboundChannel",
    "SessionRegistry",
    "SessionRelay",
    "parse_inbound",
]
