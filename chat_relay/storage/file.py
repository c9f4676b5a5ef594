"""JSON-file transcript backend: one array per session key, replaced atomically."""

from __future__ import annotations

import os
import asyncio
import hashlib
import logging
import tempfile
from pathlib import Path

import orjson

from chat_relay.errors import StorageUnavailable
from chat_relay.state.transcript import EMPTY_TRANSCRIPT, Turn, Transcript, transcript_to_records

logger = logging.getLogger(__name__)


def _decode_records(raw: bytes, *, source: str) -> Transcript:
    try:
        records = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise StorageUnavailable(f"corrupt transcript file {source}: {exc}") from exc
    if not isinstance(records, list):
        raise StorageUnavailable(f"corrupt transcript file {source}: expected a JSON array")

    turns: list[Turn] = []
    for record in records:
        turn = Turn.from_record(record)
        if turn is None:
            logger.warning("skipping malformed transcript record in %s", source)
            continue
        turns.append(turn)
    return tuple(turns)


class FileTranscriptBackend:
    """One JSON array per session key, replaced atomically on every write."""

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    def path_for(self, key: str) -> Path:
        # Keys are opaque caller-supplied strings; hash them into safe filenames.
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self._directory / f"{digest}.json"

    def _read_sync(self, key: str) -> Transcript:
        path = self.path_for(key)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return EMPTY_TRANSCRIPT
        except OSError as exc:
            raise StorageUnavailable(f"cannot read {path}: {exc}") from exc
        return _decode_records(raw, source=str(path))

    def _write_sync(self, key: str, transcript: Transcript) -> None:
        path = self.path_for(key)
        data = orjson.dumps(transcript_to_records(transcript))
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=".tmp-", suffix=".json")
            try:
                with os.fdopen(fd, "wb") as fh:
                    fh.write(data)
                    fh.flush()
                    os.fsync(fh.fileno())
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageUnavailable(f"cannot write {path}: {exc}") from exc

    async def read(self, key: str) -> Transcript:
        return await asyncio.to_thread(self._read_sync, key)

    async def write(self, key: str, transcript: Transcript) -> None:
        await asyncio.to_thread(self._write_sync, key, tuple(transcript))



__all__ = ["FileTranscriptBackend"]
