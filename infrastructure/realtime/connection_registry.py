"""In-process registry of live realtime connections.

A plain set mutated from the event loop only: the ``/ws`` open/close
hooks and the dispatcher's pruning path. No awaits happen between a
read and the corresponding write, so no lock is needed.
"""
from __future__ import annotations

from typing import List, Set

from application.ports.realtime import Connection


class ConnectionRegistry:
    """Set of currently open connections for this process."""

    def __init__(self) -> None:
        self._connections: Set[Connection] = set()

    def register(self, conn: Connection) -> None:
        """Add ``conn``; registering twice is a no-op."""
        self._connections.add(conn)

    def unregister(self, conn: Connection) -> None:
        """Remove ``conn`` if present; removing an absent one is a no-op."""
        self._connections.discard(conn)

    def size(self) -> int:
        """Current count, for observability only."""
        return len(self._connections)

    def snapshot(self) -> List[Connection]:
        """Copy of the members, safe to iterate while the set changes."""
        return list(self._connections)

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, conn: object) -> bool:
        return conn in self._connections
