"""Redis document cache for third-party JSON payloads.

Documents are stored with RedisJSON so callers can run path queries against a
large cached blob without pulling the whole thing over the wire.

TTL policies:
- Price table (csgotrader prices): 8 hours
- Currency rates: 3 hours
- Item catalogs (skins, stickers, crates, agents, patches): 24 hours

Expiry is the only eviction policy. Stale documents are never revalidated
ahead of time; the first read after expiry sees a miss and repopulates.
"""

import json
import logging
from typing import Any

import redis.asyncio as redis
from redis.exceptions import RedisError

from skinvest.services.errors import CacheReadFailure, CacheWriteFailure
from skinvest.settings import get_settings

# TTL constants (in seconds)
TTL_PRICE_TABLE = 3600 * 8  # 8 hours
TTL_CURRENCY_RATES = 3600 * 3  # 3 hours
TTL_CATALOG = 3600 * 24  # 24 hours

# Keys
KEY_PRICE_TABLE = "price-table"
KEY_CURRENCY_RATES = "currency-rates"
PREFIX_CATALOG = "catalog-"

ROOT_PATH = "$"

logger = logging.getLogger("uvicorn.error")


def catalog_key(category: str) -> str:
    """Cache key of a category catalog, e.g. ``catalog-skins``."""
    return f"{PREFIX_CATALOG}{category}"


def literal_key_path(key: str) -> str:
    """JSONPath selecting one member of the root object by its literal key.

    Item names contain spaces, pipes and parentheses, so the key is always
    bracket-quoted. ``json.dumps`` takes care of escaping quotes.
    """
    return f"{ROOT_PATH}[{json.dumps(key, ensure_ascii=False)}]"


def field_equals_path(field: str, value: str) -> str:
    """JSONPath filter selecting array elements whose ``field`` equals ``value``."""
    return f"{ROOT_PATH}[?(@.{field}=={json.dumps(value, ensure_ascii=False)})]"


def create_redis_client() -> redis.Redis:
    """Create the Redis client. Connections are opened lazily on first use."""
    settings = get_settings()
    return redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=settings.redis_timeout_seconds,
        socket_timeout=settings.redis_timeout_seconds,
    )


async def init_redis() -> redis.Redis:
    """Create the Redis client and check connectivity."""
    client = create_redis_client()
    # Validate connectivity early (especially for `rediss://` in production).
    await client.ping()
    logger.info("Redis connected")
    return client


async def close_redis(client: redis.Redis | None) -> None:
    """Close Redis connection."""
    if client is not None:
        await client.aclose()


class DocumentCache:
    """Key/value + path-query store with per-key expiry.

    Every Redis error (including socket timeouts) is re-raised as
    CacheReadFailure or CacheWriteFailure. No retries happen here.
    """

    def __init__(self, client: redis.Redis):
        self._redis = client

    async def get(self, key: str) -> Any | None:
        """Get a whole document.

        Returns:
            The decoded document, or None if the key does not exist.
        """
        matches = await self.get_path(key, ROOT_PATH)
        if not matches:
            return None
        return matches[0]

    async def get_path(self, key: str, path: str) -> list[Any] | None:
        """Run a JSONPath query against a cached document.

        Args:
            key: Cache key.
            path: JSONPath expression (``$["name"]``, ``$[?(@.name=="x")]``).

        Returns:
            List of matches (possibly empty), or None if the key does not exist.
        """
        try:
            result = await self._redis.json().get(key, path)
        except (RedisError, ValueError) as e:
            logger.error(f"Redis JSON.GET failed for key={key}: {e}")
            raise CacheReadFailure(f"Cache read failed for {key}") from e
        if result is None:
            return None
        if not isinstance(result, list):
            # Legacy (non-$) paths return the bare value.
            return [result]
        return result

    async def set(self, key: str, document: Any, ttl: int | None = None) -> None:
        """Replace a whole document.

        With `ttl`, JSON.SET and EXPIRE run in one MULTI/EXEC transaction so
        the document is never visible without its expiry (like SETEX).
        """
        if ttl is None:
            await self.set_path(key, ROOT_PATH, document)
            return
        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.json().set(key, ROOT_PATH, document)
                pipe.expire(key, ttl)
                await pipe.execute()
        except (RedisError, TypeError, ValueError) as e:
            logger.error(f"Redis JSON.SET+EXPIRE failed for key={key}: {e}")
            raise CacheWriteFailure(f"Cache write failed for {key}") from e

    async def set_path(self, key: str, path: str, document: Any) -> None:
        """Write a value at a path of a (possibly new) document."""
        try:
            await self._redis.json().set(key, path, document)
        except (RedisError, TypeError, ValueError) as e:
            logger.error(f"Redis JSON.SET failed for key={key}: {e}")
            raise CacheWriteFailure(f"Cache write failed for {key}") from e

    async def expire(self, key: str, seconds: int) -> None:
        """Set time-to-live of a key in seconds."""
        try:
            await self._redis.expire(key, seconds)
        except RedisError as e:
            logger.error(f"Redis EXPIRE failed for key={key}: {e}")
            raise CacheWriteFailure(f"Cache expire failed for {key}") from e

    async def ping(self) -> bool:
        try:
            return bool(await self._redis.ping())
        except RedisError:
            return False
