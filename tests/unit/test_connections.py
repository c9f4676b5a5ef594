from __future__ import annotations

import pytest

from chat_relay.handlers.connections import ConnectionManager
from chat_relay.handlers.websocket.session_key import get_session_key


class _Conn:
    def __init__(self, **query: str) -> None:
        self.query_params = query


@pytest.mark.asyncio
async def test_connection_manager_caps_concurrent_sockets() -> None:
    manager = ConnectionManager(max_connections=2)
    a, b, c = object(), object(), object()

    assert await manager.connect(a, "alice")
    assert await manager.connect(b, "alice")
    assert not await manager.connect(c, "bob")
    assert manager.get_connection_count() == 2
    assert manager.get_session_connection_count("alice") == 2

    await manager.disconnect(a)
    assert await manager.connect(c, "bob")
    assert manager.get_session_connection_count("alice") == 1
    assert manager.get_session_connection_count("bob") == 1


@pytest.mark.asyncio
async def test_connection_manager_disconnect_is_idempotent() -> None:
    manager = ConnectionManager(max_connections=1)
    ws = object()
    assert await manager.connect(ws, "alice")
    assert await manager.connect(ws, "alice")

    await manager.disconnect(ws)
    await manager.disconnect(ws)
    assert manager.get_connection_count() == 0
    assert manager.get_session_connection_count("alice") == 0


def test_session_key_from_query() -> None:
    assert get_session_key(_Conn(user="alice")) == "alice"
    assert get_session_key(_Conn(user="  bob ")) == "bob"
    assert get_session_key(_Conn(user="")) is None
    assert get_session_key(_Conn()) is None
