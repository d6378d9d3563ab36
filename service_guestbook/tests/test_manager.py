"""
Unit tests for the cache-aside GuestbookManager.
"""

import pytest
from unittest.mock import AsyncMock

from shared.errors import StoreError
from shared.metrics import MetricsCollector
from service_guestbook.app.guestbook.manager import GuestbookManager


class TestGuestbookManager:
    """Test cases for GuestbookManager."""

    @pytest.fixture
    def metrics(self):
        return MetricsCollector("guestbook")

    @pytest.fixture
    def manager(self, store, cache, metrics):
        """Create GuestbookManager over in-memory fakes."""
        return GuestbookManager(store, cache, metrics=metrics)

    def _lookups(self, metrics, result):
        return metrics.registry.get_sample_value(
            "guestbook_cache_lookups_total", {"result": result}
        ) or 0

    @pytest.mark.asyncio
    async def test_read_cache_hit_skips_store(self, manager, store, cache, metrics):
        """A populated cache is returned without touching the store."""
        cache.lists["k"] = ["x", "y"]
        store.fetch_latest = AsyncMock(return_value=["a"])

        result = await manager.read("k")

        assert result == ["x", "y"]
        store.fetch_latest.assert_not_called()
        assert self._lookups(metrics, "hit") == 1

    @pytest.mark.asyncio
    async def test_read_cache_miss_falls_back_and_refills(self, manager, store, cache, metrics):
        """Empty cache plus snapshot ["a", "b"] returns and caches ["a", "b"]."""
        store.rows.append("a###b")

        result = await manager.read("k")

        assert result == ["a", "b"]
        assert cache.lists["k"] == ["a", "b"]
        assert cache.calls == [
            ("read_all", "k"),
            ("clear", "k"),
            ("append", "k", "a"),
            ("append", "k", "b"),
        ]
        assert self._lookups(metrics, "miss") == 1

    @pytest.mark.asyncio
    async def test_read_empty_store_returns_empty_list(self, manager, cache):
        """No snapshot rows means an empty list and nothing cached."""
        result = await manager.read("k")

        assert result == []
        assert "k" not in cache.lists

    @pytest.mark.asyncio
    async def test_read_cache_unavailable_returns_store_result(self, manager, store, cache, metrics):
        """An unreachable cache is treated as a miss and the store answers."""
        store.rows.append("a###b")
        cache.available = False

        result = await manager.read("k")

        assert result == ["a", "b"]
        assert self._lookups(metrics, "unavailable") == 1

    @pytest.mark.asyncio
    async def test_read_is_idempotent(self, manager, store):
        """Two reads with no write in between agree."""
        store.rows.append("a###b")

        first = await manager.read("k")
        second = await manager.read("k")

        assert first == second == ["a", "b"]

    @pytest.mark.asyncio
    async def test_write_appends_snapshot_and_returns_full_list(self, manager, store, cache):
        """Writing "c" over ["a", "b"] inserts a new row and returns the full list."""
        store.rows.append("a###b")
        cache.lists["k"] = ["a", "b"]

        result = await manager.write("k", "c")

        assert result == ["a", "b", "c"]
        assert store.rows == ["a###b", "a###b###c"]
        assert cache.lists["k"] == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_write_invalidates_before_reread(self, manager, store, cache):
        """The cache is cleared after the insert so the re-read misses."""
        cache.lists["k"] = ["stale"]

        await manager.write("k", "fresh")

        assert cache.calls[:2] == [("clear", "k"), ("read_all", "k")]
        assert cache.lists["k"] == ["fresh"]

    @pytest.mark.asyncio
    async def test_round_trip_preserves_insertion_order(self, manager):
        """Entries written one at a time are read back in order."""
        for entry in ["first", "second", "third"]:
            await manager.write("k", entry)

        assert await manager.read("k") == ["first", "second", "third"]

    @pytest.mark.asyncio
    async def test_separator_in_entry_splits_on_read(self, manager):
        """An entry holding the separator comes back as two entries."""
        await manager.write("k", "hello###world")

        assert await manager.read("k") == ["hello", "world"]

    @pytest.mark.asyncio
    async def test_write_store_failure_propagates(self, manager, store, cache):
        """A failed insert surfaces as StoreError and leaves the cache alone."""
        cache.lists["k"] = ["a"]
        store.append = AsyncMock(side_effect=StoreError("Fail to insert into database"))

        with pytest.raises(StoreError):
            await manager.write("k", "b")

        assert cache.lists["k"] == ["a"]

    @pytest.mark.asyncio
    async def test_read_store_failure_propagates(self, manager, store):
        """A store failure on the miss path is not swallowed."""
        store.fetch_latest = AsyncMock(side_effect=StoreError("Fail to read database"))

        with pytest.raises(StoreError):
            await manager.read("k")

    @pytest.mark.asyncio
    async def test_write_counts_entries(self, manager, metrics):
        await manager.write("k", "a")

        assert metrics.registry.get_sample_value("guestbook_writes_total") == 1
