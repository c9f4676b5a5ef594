from __future__ import annotations

from pathlib import Path

from chat_relay.config.websocket import WS_MESSAGE_MISSING_SESSION_KEY
from tests.utils.app import receive_turn, relay_client
from tests.utils.sources import DONE_FRAME, FailingSource, ScriptedSource, frame

HELLO_STREAM = [frame("hi"), frame(" there"), DONE_FRAME]


def test_health_endpoints() -> None:
    with relay_client(ScriptedSource()) as client:
        for path in ("/", "/health", "/healthz"):
            response = client.get(path)
            assert response.status_code == 200
            assert response.json() == {"status": "ok"}


def test_history_after_completed_reply() -> None:
    with relay_client(ScriptedSource(HELLO_STREAM)) as client:
        with client.websocket_connect("/chat?user=alice") as ws:
            ws.send_text("hello")
            assert receive_turn(ws) == ["hi", " there", "\n"]

        response = client.get("/history", params={"user": "alice"})
        assert response.status_code == 200
        assert response.json() == [
            {"role": "user", "content": "hello"},
            {"role": "assistant", "content": "hi there"},
        ]
        assert client.get("/history", params={"user": "bob"}).json() == []


def test_history_persists_to_file_backend(tmp_path: Path) -> None:
    with relay_client(ScriptedSource(HELLO_STREAM), backend="file", directory=tmp_path) as client:
        with client.websocket_connect("/chat?user=alice") as ws:
            ws.send_text("hello")
            receive_turn(ws)

    with relay_client(ScriptedSource(), backend="file", directory=tmp_path) as client:
        records = client.get("/history", params={"user": "alice"}).json()
    assert [record["role"] for record in records] == ["user", "assistant"]


def test_history_requires_user() -> None:
    with relay_client(ScriptedSource()) as client:
        response = client.get("/history")
        assert response.status_code == 400
        assert response.text == WS_MESSAGE_MISSING_SESSION_KEY


def test_history_keeps_only_user_turn_after_failure() -> None:
    with relay_client(FailingSource()) as client:
        with client.websocket_connect("/chat?user=alice") as ws:
            ws.send_text("hello")
            assert receive_turn(ws) == ["AI request failed", "\n"]

        assert client.get("/history", params={"user": "alice"}).json() == [
            {"role": "user", "content": "hello"},
        ]
