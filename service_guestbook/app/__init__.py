"""
Guestbook Service package.

A small list service backed by PostgreSQL snapshots with a Redis list
cache in front. It provides:

- app.main: API surface for list reads, appends, and diagnostics.
- app.guestbook: Cache-aside coordination of reads and writes.
- app.cache: Redis list cache over master/slave endpoints.
- app.persistence: PostgreSQL snapshot log.

Guidelines:
- The service is stateless; rely on external cache/DB.
- The cache is disposable; the latest store row is authoritative.
"""
