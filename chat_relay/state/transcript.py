"""Transcript dataclasses (one role-tagged turn, ordered per session)."""

from __future__ import annotations

from typing import Any, Literal
from dataclasses import dataclass

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"
ROLES = frozenset({ROLE_USER, ROLE_ASSISTANT})

Role = Literal["user", "assistant"]


@dataclass(frozen=True, slots=True)
class Turn:
    role: Role
    content: str

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"unknown turn role: {self.role!r}")

    @classmethod
    def user(cls, content: str) -> Turn:
        return cls(role=ROLE_USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> Turn:
        return cls(role=ROLE_ASSISTANT, content=content)

    @classmethod
    def from_record(cls, record: Any) -> Turn | None:
        """Build a turn from a persisted record; None if the record is malformed."""
        if not isinstance(record, dict):
            return None
        role = record.get("role")
        content = record.get("content")
        if role not in ROLES or not isinstance(content, str):
            return None
        return cls(role=role, content=content)

    def to_record(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


Transcript = tuple[Turn, ...]

EMPTY_TRANSCRIPT: Transcript = ()


def transcript_to_records(transcript: Transcript) -> list[dict[str, str]]:
    return [turn.to_record() for turn in transcript]


__all__ = [
    "EMPTY_TRANSCRIPT",
    "ROLES",
    "ROLE_ASSISTANT",
    "ROLE_USER",
    "Role",
    "Transcript",
    "Turn",
    "transcript_to_records",
]
