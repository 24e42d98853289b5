"""Pytest bootstrap configuration.

Ensure mandatory environment variables are set before test collection
and module imports that depend on application settings.
"""
import os
import tempfile

import pytest

# Mandatory secret key for settings validation
os.environ.setdefault("SECRET_KEY", "test-secret-key")
# Isolated SQLite file per test session
_DB_DIR = tempfile.mkdtemp(prefix="event-api-tests-")
os.environ["DATABASE__URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/test.db"
os.environ.setdefault("LOG_REQUEST_BODY_ENABLE_BY_DEFAULT", "false")

from core.logging_config import configure_logging  # noqa: E402

# structlog 经标准库 logging 输出，caplog 可以直接断言事件字典
configure_logging()


@pytest.fixture
def client():
    """TestClient with a fresh schema; HTTP and WebSocket share one event loop."""
    from fastapi.testclient import TestClient

    from infrastructure.database import create_tables, drop_tables
    from main import app

    with TestClient(app) as c:
        c.portal.call(drop_tables)
        c.portal.call(create_tables)
        yield c


class FakeConnection:
    """In-memory Connection used by realtime tests."""

    def __init__(self, name: str, *, open: bool = True, fail: bool = False):
        self.id = name
        self.is_open = open
        self.fail = fail
        self.received = []

    def send(self, message: str) -> None:
        if self.fail:
            raise ConnectionError(f"{self.id}: broken pipe")
        self.received.append(message)

    def __repr__(self) -> str:
        return f"<FakeConnection {self.id}>"


@pytest.fixture
def make_conn():
    return FakeConnection
