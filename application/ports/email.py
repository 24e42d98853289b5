"""Application-owned email port.

The application only asks for a message to be delivered; transport and
templating live in infrastructure.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass
class EmailMessage:
    to: str
    subject: str
    html: str
    sender: str


@runtime_checkable
class EmailSender(Protocol):
    async def send(self, message: EmailMessage) -> None:
        """Deliver ``message``; raise on transport failure."""
        ...


__all__ = ["EmailMessage", "EmailSender"]
