#!/usr/bin/env python3
"""测试单条连接的发送、关闭与读取"""

import asyncio

import pytest
from websockets.exceptions import ConnectionClosedOK

from roomcast.exceptions import ConnectionClosedError
from roomcast.hub import Connection


async def test_send_writes_text_frame(make_ws):
    ws = make_ws()
    conn = Connection(ws)

    await conn.send("new-room")

    assert ws.sent == ["new-room"]


async def test_send_after_close_raises(make_ws):
    conn = Connection(make_ws())
    await conn.close()

    with pytest.raises(ConnectionClosedError) as exc_info:
        await conn.send("new-room")
    assert exc_info.value.error_code == "CONN002"
    assert exc_info.value.connection_id == conn.id


async def test_double_close_is_noop(make_ws):
    ws = make_ws()
    conn = Connection(ws)

    assert await conn.close() is True
    assert await conn.close() is False
    assert conn.closed
    assert ws.close_calls == 1


async def test_close_tolerates_broken_transport(make_ws):
    class BrokenWebSocket(make_ws):
        async def close(self, code=1000, reason=""):
            raise OSError("already gone")

    conn = Connection(BrokenWebSocket())

    assert await conn.close() is True
    assert conn.closed


async def test_drain_discards_messages_until_peer_closes(make_ws):
    ws = make_ws()
    conn = Connection(ws)
    ws.feed("ping")
    ws.feed("anything")
    ws.peer_close()

    await asyncio.wait_for(conn.drain(), 1.0)

    assert ws.sent == []


async def test_drain_returns_on_connection_closed(make_ws):
    ws = make_ws()
    conn = Connection(ws)
    ws.peer_error(ConnectionClosedOK(None, None))

    await asyncio.wait_for(conn.drain(), 1.0)


def test_identity_and_metadata(make_ws):
    ws = make_ws()
    conn = Connection(ws)

    assert conn.id == ws.id
    assert conn.remote_address == ws.remote_address
    assert conn != Connection(ws)
    assert "open" in repr(conn)


def test_explicit_id_wins(make_ws):
    conn = Connection(make_ws(), connection_id="custom")
    assert conn.id == "custom"
