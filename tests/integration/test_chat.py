from __future__ import annotations

import pytest
from fastapi import WebSocketDisconnect

from chat_relay.config.websocket import (
    WS_CLOSE_BUSY_CODE,
    WS_MESSAGE_SERVER_AT_CAPACITY,
    WS_MESSAGE_MISSING_SESSION_KEY,
    WS_CLOSE_MISSING_SESSION_KEY_CODE,
)
from tests.utils.app import receive_turn, relay_client
from tests.utils.sources import DONE_FRAME, ScriptedSource, frame

HELLO_STREAM = [frame("hi"), frame(" there"), DONE_FRAME]


def test_chat_streams_reply_tokens() -> None:
    chunks = ['data: {"response":"hi"}\n', 'data: {"respo', 'nse":" there"}\n', DONE_FRAME]
    with relay_client(ScriptedSource(chunks)) as client:
        with client.websocket_connect("/chat?user=alice") as ws:
            ws.send_text("hello")
            assert receive_turn(ws) == ["hi", " there", "\n"]


def test_chat_requires_user() -> None:
    with relay_client(ScriptedSource()) as client:
        with client.websocket_connect("/chat") as ws:
            assert ws.receive_text() == WS_MESSAGE_MISSING_SESSION_KEY
            with pytest.raises(WebSocketDisconnect) as exc:
                ws.receive_text()
            assert exc.value.code == WS_CLOSE_MISSING_SESSION_KEY_CODE


def test_chat_rejects_over_capacity() -> None:
    with relay_client(ScriptedSource(), max_connections=1) as client:
        with client.websocket_connect("/chat?user=alice"):
            with client.websocket_connect("/chat?user=bob") as second:
                assert second.receive_text() == WS_MESSAGE_SERVER_AT_CAPACITY
                with pytest.raises(WebSocketDisconnect) as exc:
                    second.receive_text()
                assert exc.value.code == WS_CLOSE_BUSY_CODE


def test_stop_while_idle_sends_nothing() -> None:
    with relay_client(ScriptedSource(HELLO_STREAM)) as client:
        with client.websocket_connect("/chat?user=alice") as ws:
            ws.send_text("_STOP_")
            ws.send_text("hello")
            assert receive_turn(ws) == ["hi", " there", "\n"]


def test_binary_frames_are_ignored() -> None:
    with relay_client(ScriptedSource(HELLO_STREAM)) as client:
        with client.websocket_connect("/chat?user=alice") as ws:
            ws.send_bytes(b"\x00\x01")
            ws.send_text("hello")
            assert receive_turn(ws) == ["hi", " there", "\n"]


def test_message_rate_limit_notice() -> None:
    with relay_client(ScriptedSource(HELLO_STREAM), max_messages=1) as client:
        with client.websocket_connect("/chat?user=alice") as ws:
            ws.send_text("hello")
            assert receive_turn(ws) == ["hi", " there", "\n"]

            ws.send_text("again")
            notice, end = receive_turn(ws)
            assert "rate limit" in notice
            assert end == "\n"
