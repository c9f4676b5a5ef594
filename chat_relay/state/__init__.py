from .runtime import RuntimeDeps
from .settings import AppSettings
from .session import IDLE, Idle, Generating, SessionState
from .transcript import EMPTY_TRANSCRIPT, Turn, Transcript

__all__ = [
    "AppSettings",
    "EMPTY_TRANSCRIPT",
    "Generating",
    "IDLE",
    "Idle",
    "RuntimeDeps",
    "SessionState",
    "Transcript",
    "Turn",
]
