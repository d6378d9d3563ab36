"""
Guestbook service.
"""

import json
import os
from contextlib import AsyncExitStack
from typing import Any, Optional

from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles

from shared.base_service import BaseService
from shared.config import ServiceConfig

from .cache.redis_list import RedisListCache
from .persistence.postgres import PostgresGuestbookStore
from .guestbook.manager import GuestbookManager


class IndentedJSONResponse(JSONResponse):
    """JSON body indented by two spaces."""

    def render(self, content: Any) -> bytes:
        return json.dumps(content, ensure_ascii=False, indent=2).encode("utf-8")


class GuestbookService(BaseService):
    """Guestbook service implementation."""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        store: Optional[PostgresGuestbookStore] = None,
        cache: Optional[RedisListCache] = None
    ):
        super().__init__("guestbook", 3000, config=config)

        self.persistence = store or PostgresGuestbookStore(self.config.postgres_connect_kwargs())
        self.cache = cache or RedisListCache(self.config.redis_master_url, self.config.redis_slave_url)
        self.guestbook = GuestbookManager(self.persistence, self.cache, metrics=self.metrics)
        self._resources: Optional[AsyncExitStack] = None

        self._setup_guestbook_routes()
        self._mount_static()

    def _setup_guestbook_routes(self):
        """Set up guestbook-specific routes."""

        @self.app.get("/lrange/{key}")
        async def list_range(key: str):
            """Read the list through the cache."""
            members = await self.guestbook.read(key)
            return IndentedJSONResponse(members)

        @self.app.get("/rpush/{key}/{value}")
        async def list_push(key: str, value: str):
            """Append an entry and return the full list."""
            members = await self.guestbook.write(key, value)
            return IndentedJSONResponse(members)

        @self.app.get("/info")
        async def info():
            """Raw INFO from the cache master."""
            return PlainTextResponse(await self.cache.info())

        @self.app.get("/env")
        async def env():
            """Process environment as a flat object."""
            return IndentedJSONResponse(dict(os.environ))

    def _mount_static(self):
        # Mounted last so API routes take precedence
        if os.path.isdir(self.config.static_dir):
            self.app.mount(
                "/",
                StaticFiles(directory=self.config.static_dir, html=True),
                name="static"
            )
            self.logger.info("Serving static files", directory=self.config.static_dir)

    async def _check_dependencies(self):
        """Check guestbook service dependencies."""
        return {
            "redis": "ok" if await self.cache.health_check() else "error",
            "postgres": "ok" if await self.persistence.health_check() else "error",
        }

    async def start(self):
        """Start guestbook service components.

        Components opened before a failure are closed again before the
        error propagates.
        """
        async with AsyncExitStack() as stack:
            await self.persistence.start()
            stack.push_async_callback(self.persistence.stop)

            await self.cache.start()
            stack.push_async_callback(self.cache.stop)

            self._resources = stack.pop_all()

        self.logger.info("Guestbook service started")

    async def stop(self):
        """Stop guestbook service components."""
        if self._resources is not None:
            await self._resources.aclose()
            self._resources = None

        self.logger.info("Guestbook service stopped")


def create_app():
    """Create guestbook service application."""
    service = GuestbookService()
    return service.app


def main():
    service = GuestbookService()
    service.run()


if __name__ == "__main__":
    main()
