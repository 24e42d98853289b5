"""WebSocket route for realtime change notifications.

Clients connect to ``/ws`` and receive every broadcast issued after
registration. The only inbound frame handled is ``{"type": "ping"}``,
answered with ``{"type": "pong"}`` through the same ordered send queue.
"""
from __future__ import annotations

import json

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from application.services.realtime_service import RealtimeService
from infrastructure.realtime.websocket_connection import ConnectionClosedError
from api.dependencies import get_realtime_service
from core.logging_config import get_logger


logger = get_logger(__name__)


router = APIRouter(prefix="/ws", tags=["WebSocket"])

PONG = json.dumps({"type": "pong"}, separators=(",", ":"))


def _message_type(raw: str) -> str:
    try:
        msg = json.loads(raw)
    except ValueError:
        return ""
    if not isinstance(msg, dict):
        return ""
    return str(msg.get("type") or "").lower()


@router.websocket("")
async def websocket_endpoint(
    ws: WebSocket,
    rt: RealtimeService = Depends(get_realtime_service),
) -> None:
    await ws.accept()
    conn = rt.open(ws)
    try:
        while True:
            message = await ws.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            raw = message.get("text")
            if raw and _message_type(raw) == "ping":
                conn.send(PONG)
            # 其他消息忽略：该通道只用于服务端推送
    except WebSocketDisconnect as exc:
        logger.debug("ws_client_closed", conn_id=conn.id, code=exc.code)
    except ConnectionClosedError as exc:
        logger.info("ws_dropped", conn_id=conn.id, error=str(exc))
    finally:
        await rt.close(conn)
