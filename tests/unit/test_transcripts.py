from __future__ import annotations

from pathlib import Path

import orjson
import pytest

from chat_relay.errors import StorageUnavailable
from chat_relay.state import Turn
from chat_relay.storage import TranscriptStore, FileTranscriptBackend, MemoryTranscriptBackend, build_backend
from tests.utils.storage import BrokenBackend, FlakyBackend


def test_turn_rejects_unknown_role() -> None:
    with pytest.raises(ValueError):
        Turn(role="system", content="x")  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "record",
    [None, [], {"role": "user"}, {"role": "tool", "content": "x"}, {"role": "user", "content": 3}],
)
def test_turn_from_malformed_record(record: object) -> None:
    assert Turn.from_record(record) is None


@pytest.mark.asyncio
async def test_store_appends_in_order_and_reads_back() -> None:
    store = TranscriptStore(MemoryTranscriptBackend())
    assert await store.load("k") == ()

    await store.append("k", Turn.user("hello"))
    await store.append("k", Turn.assistant("hi there"))

    assert await store.load("k") == (Turn.user("hello"), Turn.assistant("hi there"))
    assert await store.read("other") == ()


@pytest.mark.asyncio
async def test_store_load_failure_is_not_cached() -> None:
    backend = BrokenBackend(fail_reads=True, fail_writes=False)
    store = TranscriptStore(backend)

    with pytest.raises(StorageUnavailable):
        await store.load("k")

    backend.fail_reads = False
    assert await store.load("k") == ()


@pytest.mark.asyncio
async def test_store_never_overwrites_history_it_could_not_read() -> None:
    earlier = (Turn.user("first"), Turn.assistant("reply"))
    backend = FlakyBackend({"k": earlier})
    store = TranscriptStore(backend)

    backend.fail_reads = True
    with pytest.raises(StorageUnavailable):
        await store.load("k")
    with pytest.raises(StorageUnavailable):
        await store.append("k", Turn.user("second"))

    assert backend.writes == []
    assert store.cached("k") == (Turn.user("second"),)

    backend.fail_reads = False
    await store.append("k", Turn.assistant("ok"))

    merged = earlier + (Turn.user("second"), Turn.assistant("ok"))
    assert backend.writes == [merged]
    assert await store.read("k") == merged
    assert store.cached("k") == merged


@pytest.mark.asyncio
async def test_store_keeps_turn_in_memory_when_write_fails() -> None:
    store = TranscriptStore(BrokenBackend(fail_reads=False, fail_writes=True))

    with pytest.raises(StorageUnavailable):
        await store.append("k", Turn.user("hello"))
    assert await store.read("k") == (Turn.user("hello"),)


@pytest.mark.asyncio
async def test_store_wraps_unexpected_backend_errors() -> None:
    class _Exploding:
        async def read(self, key: str):
            raise OSError("disk gone")

        async def write(self, key: str, transcript) -> None:
            raise OSError("disk gone")

    store = TranscriptStore(_Exploding())
    with pytest.raises(StorageUnavailable):
        await store.read("k")
    with pytest.raises(StorageUnavailable):
        await store.append("k", Turn.user("x"))


@pytest.mark.asyncio
async def test_file_backend_persists_across_instances(tmp_path: Path) -> None:
    first = TranscriptStore(FileTranscriptBackend(tmp_path))
    await first.append("user@example.com", Turn.user("hello"))
    await first.append("user@example.com", Turn.assistant("hi"))

    second = TranscriptStore(FileTranscriptBackend(tmp_path))
    assert await second.load("user@example.com") == (Turn.user("hello"), Turn.assistant("hi"))

    files = [path for path in tmp_path.iterdir() if not path.name.startswith(".tmp-")]
    assert len(files) == 1
    assert orjson.loads(files[0].read_bytes()) == [
        {"role": "user", "content": "hello"},
        {"role": "assistant", "content": "hi"},
    ]


def test_file_backend_keys_do_not_escape_directory(tmp_path: Path) -> None:
    backend = FileTranscriptBackend(tmp_path)
    path = backend.path_for("../../etc/passwd")
    assert path.parent == tmp_path
    assert backend.path_for("a") != backend.path_for("b")


@pytest.mark.asyncio
async def test_file_backend_corrupt_file_is_unavailable(tmp_path: Path) -> None:
    backend = FileTranscriptBackend(tmp_path)
    backend.path_for("k").write_bytes(b"{not json")

    with pytest.raises(StorageUnavailable):
        await backend.read("k")

    backend.path_for("k").write_bytes(b'{"role": "user"}')
    with pytest.raises(StorageUnavailable):
        await backend.read("k")


@pytest.mark.asyncio
async def test_file_backend_skips_malformed_records(tmp_path: Path) -> None:
    backend = FileTranscriptBackend(tmp_path)
    backend.path_for("k").write_bytes(
        orjson.dumps([{"role": "user", "content": "ok"}, {"role": "bogus"}, "junk"])
    )
    assert await backend.read("k") == (Turn.user("ok"),)


def test_build_backend(tmp_path: Path) -> None:
    assert isinstance(build_backend("memory", directory=tmp_path), MemoryTranscriptBackend)
    assert isinstance(build_backend("file", directory=tmp_path), FileTranscriptBackend)
    with pytest.raises(ValueError):
        build_backend("redis", directory=tmp_path)
