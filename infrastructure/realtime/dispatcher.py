"""Best-effort broadcast of change notifications to live connections.

The message is serialized once per call and handed to each connection's
non-blocking ``send``. Connections that are no longer open, or whose
send fails, are unregistered and skipped; the rest still receive it.
Delivery is at-most-once with no acknowledgement and no retry.
"""
from __future__ import annotations

from typing import Any

from application.ports.realtime import BroadcastEvent, encode_message
from core.logging_config import get_logger
from .connection_registry import ConnectionRegistry


logger = get_logger(__name__)


class BroadcastDispatcher:
    """Fan out one named event to every connection in a registry."""

    def __init__(self, registry: ConnectionRegistry) -> None:
        self._registry = registry

    def broadcast(self, event_name: str, payload: Any) -> None:
        """Push ``{"event": event_name, "data": payload}`` to all live connections.

        Never raises. The mutation that triggered the call has already been
        committed, so failures here are logged and absorbed.
        """
        try:
            self._broadcast(event_name, payload)
        except Exception:
            logger.exception("broadcast_failed", event_name=str(event_name))

    def _broadcast(self, event_name: str, payload: Any) -> None:
        # 每次调用恰好序列化一次，与连接数无关（包括 0）
        message = encode_message(event_name, payload)
        targets = self._registry.snapshot()
        if not targets:
            logger.debug("broadcast_skipped", event_name=str(event_name), reason="no_connections")
            return

        delivered = 0
        pruned = 0
        for conn in targets:
            if not conn.is_open:
                self._registry.unregister(conn)
                pruned += 1
                continue
            try:
                conn.send(message)
            except Exception as exc:
                # 单个连接失败不影响其他连接
                self._registry.unregister(conn)
                pruned += 1
                logger.warning("ws_send_failed", conn_id=str(conn.id), error=str(exc))
                continue
            delivered += 1

        logger.debug(
            "broadcast_sent",
            event_name=str(event_name),
            delivered=delivered,
            pruned=pruned,
            remaining=self._registry.size(),
        )

    # 便捷封装：只固定事件名
    def broadcast_event_created(self, event: Any) -> None:
        self.broadcast(BroadcastEvent.EVENT_CREATED.value, event)

    def broadcast_event_updated(self, event: Any) -> None:
        self.broadcast(BroadcastEvent.EVENT_UPDATED.value, event)

    def broadcast_event_deleted(self, event_id: Any) -> None:
        self.broadcast(BroadcastEvent.EVENT_DELETED.value, {"eventId": event_id})

    def broadcast_rsvp_updated(self, rsvp: Any) -> None:
        self.broadcast(BroadcastEvent.RSVP_UPDATED.value, rsvp)
