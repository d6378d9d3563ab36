"""
Shared fixtures for Guestbook service tests.
"""

from typing import Dict, List

import pytest

from shared.config import get_config
from shared.errors import CacheMissError, CacheUnavailableError
from service_guestbook.app.persistence.postgres import encode_entries, decode_entries


class InMemoryStore:
    """Snapshot log kept in a Python list of encoded rows."""

    def __init__(self, rows: List[str] = None):
        self.rows: List[str] = list(rows or [])
        self.started = False
        self.healthy = True

    async def start(self):
        self.started = True

    async def stop(self):
        self.started = False

    async def append(self, entries):
        self.rows.append(encode_entries(entries))

    async def fetch_latest(self) -> List[str]:
        if not self.rows:
            return []
        return decode_entries(self.rows[-1])

    async def health_check(self) -> bool:
        return self.healthy


class InMemoryListCache:
    """Redis list stand-in; one dict plays both master and slave."""

    def __init__(self):
        self.lists: Dict[str, List[str]] = {}
        self.started = False
        self.available = True
        self.calls: List[tuple] = []

    async def start(self):
        self.started = True

    async def stop(self):
        self.started = False

    async def read_all(self, key: str) -> List[str]:
        self.calls.append(("read_all", key))
        if not self.available:
            raise CacheUnavailableError("Redis slave read failed", {"key": key})
        members = self.lists.get(key)
        if not members:
            raise CacheMissError(key)
        return list(members)

    async def clear(self, key: str):
        self.calls.append(("clear", key))
        if not self.available:
            raise CacheUnavailableError("Redis master clear failed", {"key": key})
        self.lists.pop(key, None)

    async def append(self, key: str, value: str):
        self.calls.append(("append", key, value))
        if not self.available:
            raise CacheUnavailableError("Redis master append failed", {"key": key})
        self.lists.setdefault(key, []).append(value)

    async def info(self) -> str:
        if not self.available:
            raise CacheUnavailableError("Redis master INFO failed")
        return "# Server\r\nredis_version:7.2.4\r\nrole:master\r\n"

    async def health_check(self) -> bool:
        return self.available


@pytest.fixture
def store():
    """Empty in-memory snapshot store."""
    return InMemoryStore()


@pytest.fixture
def cache():
    """Empty in-memory list cache."""
    return InMemoryListCache()


@pytest.fixture
def config(tmp_path):
    """Service config with no static directory on disk."""
    return get_config("guestbook", 3000, static_dir=str(tmp_path / "missing-public"))
