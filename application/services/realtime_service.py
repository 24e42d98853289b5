"""Application service for the realtime WebSocket lifecycle.

Keeps the gateway free of registry bookkeeping: a socket is wrapped,
its sender started and registered on open, and the reverse on close.
"""
from __future__ import annotations

from fastapi import WebSocket

from core.logging_config import get_logger
from infrastructure.realtime.connection_registry import ConnectionRegistry
from infrastructure.realtime.websocket_connection import WebSocketConnection


logger = get_logger(__name__)


class RealtimeService:
    def __init__(self, *, registry: ConnectionRegistry) -> None:
        self._registry = registry

    def open(self, ws: WebSocket) -> WebSocketConnection:
        """Register an accepted socket; it receives every broadcast from now on."""
        conn = WebSocketConnection(ws)
        conn.start()
        self._registry.register(conn)
        logger.info("ws_connected", conn_id=conn.id, connections=self._registry.size())
        return conn

    async def close(self, conn: WebSocketConnection) -> None:
        self._registry.unregister(conn)
        await conn.stop()
        logger.info("ws_disconnected", conn_id=conn.id, connections=self._registry.size())

    async def shutdown(self) -> None:
        """进程退出时停止所有发送任务"""
        conns = self._registry.snapshot()
        for conn in conns:
            await self.close(conn)
        logger.info("realtime_shutdown", closed=len(conns))
