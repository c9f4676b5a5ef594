from .file import FileTranscriptBackend
from .store import TranscriptStore
from .memory import MemoryTranscriptBackend
from .factory import build_backend
from .protocol import TranscriptBackend

__all__ = [
    "FileTranscriptBackend",
    "MemoryTranscriptBackend",
    "TranscriptBackend",
    "TranscriptStore",
    "build_backend",
]
