import asyncio

import pytest
from starlette.websockets import WebSocketState

from infrastructure.realtime.connection_registry import ConnectionRegistry
from infrastructure.realtime.dispatcher import BroadcastDispatcher
from infrastructure.realtime.websocket_connection import (
    ConnectionClosedError,
    WebSocketConnection,
)


class FakeWebSocket:
    def __init__(self, *, fail: bool = False):
        self.sent = []
        self.fail = fail
        self.closed_with = None
        self.application_state = WebSocketState.CONNECTED

    async def send_text(self, message: str) -> None:
        if self.fail:
            raise RuntimeError("transport closed")
        self.sent.append(message)

    async def close(self, code: int = 1000) -> None:
        self.closed_with = code
        self.application_state = WebSocketState.DISCONNECTED


async def _until(predicate, attempts: int = 200) -> None:
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


@pytest.mark.asyncio
async def test_messages_are_delivered_in_order():
    ws = FakeWebSocket()
    conn = WebSocketConnection(ws, queue_max=10)
    conn.start()

    for i in range(5):
        conn.send(f"m{i}")
    await _until(lambda: len(ws.sent) == 5)

    assert ws.sent == [f"m{i}" for i in range(5)]
    assert conn.is_open
    await conn.stop()


@pytest.mark.asyncio
async def test_send_does_not_wait_for_delivery():
    ws = FakeWebSocket()
    conn = WebSocketConnection(ws, queue_max=10)
    conn.start()

    conn.send("hello")

    assert ws.sent == []
    assert conn.pending == 1
    await _until(lambda: ws.sent == ["hello"])
    await conn.stop()


@pytest.mark.asyncio
async def test_full_queue_closes_connection_with_overflow_code():
    ws = FakeWebSocket()
    conn = WebSocketConnection(ws, queue_max=1, close_code=1013)
    # 不启动发送任务，模拟消费过慢的客户端
    conn.send("first")

    with pytest.raises(ConnectionClosedError):
        conn.send("second")

    assert not conn.is_open
    await _until(lambda: ws.closed_with is not None)
    assert ws.closed_with == 1013
    with pytest.raises(ConnectionClosedError):
        conn.send("third")


@pytest.mark.asyncio
async def test_transport_failure_marks_connection_closed():
    ws = FakeWebSocket(fail=True)
    conn = WebSocketConnection(ws, queue_max=10)
    conn.start()

    conn.send("boom")
    await _until(lambda: not conn.is_open)
    await conn.stop()


@pytest.mark.asyncio
async def test_dispatcher_prunes_connection_after_transport_failure():
    registry = ConnectionRegistry()
    dispatcher = BroadcastDispatcher(registry)
    healthy_ws, broken_ws = FakeWebSocket(), FakeWebSocket(fail=True)
    healthy = WebSocketConnection(healthy_ws, queue_max=10)
    broken = WebSocketConnection(broken_ws, queue_max=10)
    for conn in (healthy, broken):
        conn.start()
        registry.register(conn)

    dispatcher.broadcast("event_created", {"id": 1})
    await _until(lambda: not broken.is_open and len(healthy_ws.sent) == 1)
    assert registry.size() == 2  # 失败在下一次广播时才被发现

    dispatcher.broadcast("event_updated", {"id": 1})
    await _until(lambda: len(healthy_ws.sent) == 2)

    assert registry.snapshot() == [healthy]
    assert healthy_ws.sent == [
        '{"event":"event_created","data":{"id":1}}',
        '{"event":"event_updated","data":{"id":1}}',
    ]
    await healthy.stop()
    await broken.stop()


@pytest.mark.asyncio
async def test_stop_drops_pending_messages():
    ws = FakeWebSocket()
    conn = WebSocketConnection(ws, queue_max=10)
    conn.start()
    await conn.stop()

    assert not conn.is_open
    with pytest.raises(ConnectionClosedError):
        conn.send("late")
    assert ws.sent == []
