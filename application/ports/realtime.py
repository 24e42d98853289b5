"""
Realtime port and wire message (contracts-first).

This module defines the broadcast message pushed to WebSocket clients
and the protocols the application layer depends on, so services stay
decoupled from the concrete connection/transport implementation.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Hashable, Protocol

from pydantic import BaseModel, JsonValue


class BroadcastEvent(str, Enum):
    EVENT_CREATED = "event_created"
    EVENT_UPDATED = "event_updated"
    EVENT_DELETED = "event_deleted"
    RSVP_UPDATED = "rsvp_updated"


class BroadcastMessage(BaseModel):
    """Message pushed to every live connection.

    Exactly two fields on the wire: ``event`` and ``data``. No version,
    no message id, no sequence number; clients apply each one independently.
    """

    event: BroadcastEvent
    data: JsonValue


def encode_message(event_name: str, payload: Any) -> str:
    """Validate and serialize one broadcast message to compact JSON."""
    return BroadcastMessage(event=event_name, data=payload).model_dump_json()


class Connection(Protocol):
    """An open realtime channel as seen by the registry and dispatcher."""

    @property
    def id(self) -> Hashable: ...

    @property
    def is_open(self) -> bool: ...

    def send(self, message: str) -> None:
        """Queue ``message`` without waiting for delivery; raise on failure."""
        ...


class BroadcastPort(Protocol):
    """Fire-and-forget fan-out used by application services after a commit.

    Every method returns ``None`` and never raises: delivery failures are
    intentionally unobservable to the caller.
    """

    def broadcast(self, event_name: str, payload: Any) -> None: ...

    def broadcast_event_created(self, event: Any) -> None: ...

    def broadcast_event_updated(self, event: Any) -> None: ...

    def broadcast_event_deleted(self, event_id: Any) -> None: ...

    def broadcast_rsvp_updated(self, rsvp: Any) -> None: ...


__all__ = [
    "BroadcastEvent",
    "BroadcastMessage",
    "encode_message",
    "Connection",
    "BroadcastPort",
]
