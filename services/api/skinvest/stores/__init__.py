"""Data stores for persistence and caching.

Stores handle:
- PostgreSQL: engine, sessions, ORM base
- Redis: JSON document cache, TTL policies, cache keys

No business logic in stores - that belongs in services.
"""
