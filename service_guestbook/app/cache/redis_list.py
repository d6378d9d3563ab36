"""
Redis list cache for the Guestbook service.

Writes go to the master endpoint and reads to the slave endpoint. The
list under a key is a projection of the latest snapshot in the store
and carries no authority of its own.
"""

from typing import List, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from shared.logging import get_logger
from shared.errors import CacheMissError, CacheUnavailableError


class RedisListCache:
    """Redis list cache split across a write and a read endpoint."""

    def __init__(self, master_url: str, slave_url: str):
        self.master_url = master_url
        self.slave_url = slave_url
        self.logger = get_logger("guestbook.cache.redis")
        self.master: Optional[redis.Redis] = None
        self.slave: Optional[redis.Redis] = None

    def _connect(self, url: str) -> redis.Redis:
        return redis.from_url(
            url,
            encoding="utf-8",
            decode_responses=True,
            health_check_interval=30
        )

    async def start(self):
        """Open both clients.

        Clients connect lazily, so an unreachable endpoint is only logged;
        reads fall back to the store and writes fail per request until it
        answers.
        """
        self.master = self._connect(self.master_url)
        self.slave = self._connect(self.slave_url)

        # INFO is passed through verbatim rather than parsed into a dict
        self.master.set_response_callback("INFO", lambda response, **options: response)

        for role, client, url in (("master", self.master, self.master_url),
                                  ("slave", self.slave, self.slave_url)):
            try:
                await client.ping()
            except RedisError as e:
                self.logger.warning("Redis endpoint unreachable", role=role, url=url, error=str(e))

        self.logger.info("Redis list cache started")

    async def stop(self):
        """Close both clients."""
        for client in (self.master, self.slave):
            if client is not None:
                await client.aclose()
        self.master = None
        self.slave = None
        self.logger.info("Redis list cache stopped")

    async def read_all(self, key: str) -> List[str]:
        """Return every member of the list, read from the slave.

        Raises CacheMissError when the list is absent or empty and
        CacheUnavailableError when the slave cannot be reached.
        """
        try:
            members = await self.slave.lrange(key, 0, -1)
        except RedisError as e:
            self.logger.warning("Cache read failed", key=key, error=str(e))
            raise CacheUnavailableError("Redis slave read failed", {"key": key, "error": str(e)}) from e

        if not members:
            raise CacheMissError(key)

        self.logger.debug("Cache hit", key=key, count=len(members))
        return list(members)

    async def clear(self, key: str):
        """Delete the list on the master. No-op when absent."""
        try:
            await self.master.delete(key)
        except RedisError as e:
            raise CacheUnavailableError("Redis master clear failed", {"key": key, "error": str(e)}) from e

    async def append(self, key: str, value: str):
        """Append one member to the end of the list on the master."""
        try:
            await self.master.rpush(key, value)
        except RedisError as e:
            raise CacheUnavailableError("Redis master append failed", {"key": key, "error": str(e)}) from e

    async def info(self) -> str:
        """Raw INFO output from the master."""
        try:
            return await self.master.execute_command("INFO")
        except RedisError as e:
            raise CacheUnavailableError("Redis master INFO failed", {"error": str(e)}) from e

    async def health_check(self) -> bool:
        """Check Redis master health."""
        if self.master is None:
            return False
        try:
            return bool(await self.master.ping())
        except RedisError:
            return False
