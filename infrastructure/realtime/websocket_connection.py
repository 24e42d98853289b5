"""WebSocket-backed realtime connection.

``send`` only enqueues; a per-connection sender task drains the bounded
queue in FIFO order, so one slow client never blocks a broadcast and
messages reach each client in the order they were issued.
"""
from __future__ import annotations

import asyncio
import uuid
from typing import Optional

from fastapi import WebSocket
from starlette.websockets import WebSocketState

from core.config import settings
from core.logging_config import get_logger


logger = get_logger(__name__)


class ConnectionClosedError(RuntimeError):
    """Raised by ``send`` once the connection can no longer accept messages."""


class WebSocketConnection:
    """Adapter exposing a FastAPI WebSocket through the realtime Connection protocol."""

    def __init__(
        self,
        ws: WebSocket,
        *,
        queue_max: Optional[int] = None,
        close_code: Optional[int] = None,
    ) -> None:
        self.id = uuid.uuid4().hex
        self._ws = ws
        if queue_max is None:
            queue_max = settings.realtime.send_queue_max
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=max(1, int(queue_max)))
        self._close_code = close_code or settings.realtime.close_code_overflow
        self._sender: Optional[asyncio.Task] = None
        self._close_task: Optional[asyncio.Task] = None
        self._closed = False

    def __repr__(self) -> str:
        return f"<WebSocketConnection(id={self.id}, open={self.is_open})>"

    @property
    def is_open(self) -> bool:
        return not self._closed and self._ws.application_state == WebSocketState.CONNECTED

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def start(self) -> None:
        """Start the sender task; must be called from the running event loop."""
        if self._sender is None:
            self._sender = asyncio.create_task(self._sender_loop())

    def send(self, message: str) -> None:
        if self._closed:
            raise ConnectionClosedError(f"connection {self.id} is closed")
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull:
            logger.warning("ws_send_queue_full", conn_id=self.id, queue_max=self._queue.maxsize)
            self._abort()
            raise ConnectionClosedError(f"connection {self.id} send queue is full")

    async def stop(self) -> None:
        """Stop delivering; queued messages are dropped."""
        self._closed = True
        sender, self._sender = self._sender, None
        if sender is not None and not sender.done():
            sender.cancel()
            try:
                await sender
            except asyncio.CancelledError:
                pass

    def _abort(self) -> None:
        # 客户端消费过慢：停止发送并以 1013 (Try Again Later) 关闭
        self._closed = True
        if self._sender is not None:
            self._sender.cancel()
            self._sender = None
        self._close_task = asyncio.create_task(self._close(self._close_code))

    async def _close(self, code: int) -> None:
        try:
            await self._ws.close(code=code)
        except Exception as exc:
            # 对端可能已经断开
            logger.debug("ws_close_failed", conn_id=self.id, error=str(exc))

    async def _sender_loop(self) -> None:
        while True:
            message = await self._queue.get()
            try:
                await self._ws.send_text(message)
            except Exception as exc:
                # 标记为关闭，下一次广播时由调度器清理
                self._closed = True
                logger.warning("ws_send_failed", conn_id=self.id, error=str(exc))
                return
