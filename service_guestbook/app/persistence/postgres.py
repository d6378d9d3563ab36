"""
PostgreSQL persistence layer for the Guestbook service.
"""

from typing import Any, Dict, List, Optional, Sequence

import asyncpg

from shared.logging import get_logger
from shared.errors import StoreError

SEPARATOR = "###"
TABLE = "guestbooks"

_DB_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


def encode_entries(entries: Sequence[str]) -> str:
    """Join entries into one snapshot string.

    An entry that itself contains the separator will not survive a
    round trip through decode_entries.
    """
    return SEPARATOR.join(entries)


def decode_entries(data: str) -> List[str]:
    """Split a stored snapshot string back into entries."""
    return data.split(SEPARATOR)


class PostgresGuestbookStore:
    """Append-only snapshot log of guestbook entry lists."""

    def __init__(self, connect_kwargs: Dict[str, Any]):
        self.connect_kwargs = connect_kwargs
        self.logger = get_logger("guestbook.persistence.postgres")
        self.pool: Optional[asyncpg.Pool] = None

    async def start(self):
        """Start the persistence layer."""
        try:
            self.pool = await asyncpg.create_pool(
                min_size=1,
                max_size=10,
                **self.connect_kwargs
            )

            await self._create_tables()

            self.logger.info("PostgreSQL persistence started", host=self.connect_kwargs.get("host"))

        except _DB_ERRORS as e:
            self.logger.error("Failed to start PostgreSQL persistence", error=str(e))
            await self.stop()
            raise StoreError("Fail to connect to database", {"error": str(e)}) from e

    async def stop(self):
        """Stop the persistence layer."""
        if self.pool:
            await self.pool.close()
            self.pool = None
            self.logger.info("PostgreSQL persistence stopped")

    async def _create_tables(self):
        await self.pool.execute(f"""
            CREATE TABLE IF NOT EXISTS {TABLE} (
                id SERIAL PRIMARY KEY,
                "values" TEXT NOT NULL
            );
        """)

    async def append(self, entries: Sequence[str]):
        """Insert a new snapshot row holding the full entry list."""
        try:
            await self.pool.execute(
                f'INSERT INTO {TABLE} ("values") VALUES ($1)',
                encode_entries(entries)
            )
        except _DB_ERRORS as e:
            self.logger.error("Error inserting snapshot", error=str(e))
            raise StoreError("Fail to insert into database", {"error": str(e)}) from e

        self.logger.debug("Snapshot appended", count=len(entries))

    async def fetch_latest(self) -> List[str]:
        """Entry list of the most recently inserted row, or [] if none."""
        try:
            data = await self.pool.fetchval(
                f'SELECT "values" FROM {TABLE} ORDER BY id DESC LIMIT 1'
            )
        except _DB_ERRORS as e:
            self.logger.error("Error reading latest snapshot", error=str(e))
            raise StoreError("Fail to read database", {"error": str(e)}) from e

        if data is None:
            return []
        if not isinstance(data, str):
            raise StoreError("Fail to read values", {"type": type(data).__name__})

        return decode_entries(data)

    async def health_check(self) -> bool:
        """Check database health."""
        if self.pool is None:
            return False
        try:
            await self.pool.fetchval("SELECT 1")
            return True
        except _DB_ERRORS:
            return False
