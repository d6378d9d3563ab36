"""
Cache-aside coordination between the Redis list and the snapshot store.
"""

from typing import List, Optional

from shared.logging import get_logger
from shared.metrics import MetricsCollector, get_metrics_collector
from shared.errors import CacheError, CacheMissError

from ..cache.redis_list import RedisListCache
from ..persistence.postgres import PostgresGuestbookStore


class GuestbookManager:
    """Reads and writes guestbook lists through the cache and the store.

    Nothing here serializes concurrent requests. Two writes on the same
    key can both read the same base snapshot and one entry is lost, and a
    read refilling the cache can interleave with a write clearing it.
    """

    def __init__(
        self,
        store: PostgresGuestbookStore,
        cache: RedisListCache,
        metrics: Optional[MetricsCollector] = None
    ):
        self.store = store
        self.cache = cache
        self.metrics = metrics or get_metrics_collector("guestbook")
        self.logger = get_logger("guestbook.manager")

    async def read(self, key: str) -> List[str]:
        """Return the list for key, refilling the cache from the store on a miss."""
        try:
            members = await self.cache.read_all(key)
        except CacheError as e:
            result = "miss" if isinstance(e, CacheMissError) else "unavailable"
            self.metrics.increment_counter("guestbook_cache_lookups_total", result=result)
            self.logger.info("Cache miss, reading store", key=key, reason=e.code)
            return await self._refill(key)

        self.metrics.increment_counter("guestbook_cache_lookups_total", result="hit")
        return members

    async def write(self, key: str, value: str) -> List[str]:
        """Append value to the latest snapshot, invalidate the cache and re-read."""
        entries = await self._fetch_latest()
        entries.append(value)

        with self.metrics.time_operation("guestbook_store_operation_duration_seconds", operation="append"):
            await self.store.append(entries)
        self.metrics.increment_counter("guestbook_writes_total")

        await self.cache.clear(key)
        self.logger.info("Entry written", key=key, count=len(entries))

        return await self.read(key)

    async def _refill(self, key: str) -> List[str]:
        entries = await self._fetch_latest()

        try:
            await self.cache.clear(key)
            for member in entries:
                await self.cache.append(key, member)
        except CacheError as e:
            # The store result is still authoritative
            self.logger.warning("Cache refill failed", key=key, error=e.message)

        return entries

    async def _fetch_latest(self) -> List[str]:
        with self.metrics.time_operation("guestbook_store_operation_duration_seconds", operation="fetch_latest"):
            return await self.store.fetch_latest()
