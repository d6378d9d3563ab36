"""
Cache package for Guestbook Service.

Provides a Redis list cache that reads from a replica and writes to the
primary.
"""

from .redis_list import RedisListCache

__all__ = ["RedisListCache"]
