"""Shared fixtures: in-memory stand-ins for Redis, the remote sources and the index."""

import copy
import json
from typing import Any

import pytest

from skinvest.services.errors import CacheReadFailure, CacheWriteFailure, IndexSyncFailure
from skinvest.services.price_cache import PriceCacheManager
from skinvest.services.catalog_cache import CatalogCacheManager
from skinvest.services.sources import parse_currency_rates
from skinvest.services.valuation import ValuationService


PRICE_TABLE = {
    "AK-47 | Redline (Field-Tested)": {
        "steam": {"last_24h": 14.2, "last_7d": 14.05, "last_30d": 13.9, "last_90d": 13.1},
        "skinport": {"suggested_price": 13.5, "starting_at": 12.99},
        "buff163": {"starting_at": {"price": 11.8}, "highest_order": {"price": 11.2}},
        "bitskins": {"price": 12.0},
    },
    "StatTrak™ AK-47 | Redline (Field-Tested)": {
        "steam": {"last_24h": 41.0, "last_7d": None, "last_30d": 39.5, "last_90d": None},
    },
    "AK-47 | Fire Serpent (Minimal Wear)": {
        "skinport": {"suggested_price": 1450.0, "starting_at": None},
    },
    "Sticker | Crown (Foil)": {
        "steam": {"last_24h": 820.0},
    },
}

CURRENCY_RATES = {"USD": 1, "EUR": 0.92, "CNY": 7.19, "GBP": 0.79}

CATALOGS = {
    "skins": [
        {"id": "skin-1", "name": "AK-47 | Redline", "image": "https://cdn.example/ak47_redline.png"},
        {"id": "skin-2", "name": "AK-47 | Fire Serpent", "image": "https://cdn.example/ak47_fire.png"},
        {"id": "skin-3", "name": "★ Karambit | Doppler", "image": "https://cdn.example/karambit.png"},
    ],
    "stickers": [
        {"id": "sticker-1", "name": "Sticker | Crown (Foil)", "image": "https://cdn.example/crown.png"},
    ],
    "crates": [
        {"id": "crate-1", "name": "Revolution Case", "image": "https://cdn.example/revolution.png"},
    ],
    "agents": [],
    "patches": [],
}


class FakeDocumentCache:
    """DocumentCache with RedisJSON-like path semantics and a manual clock.

    Understands the three path forms the services emit:
    `$`, `$["literal key"]` and `$[?(@.field=="value")]`.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self.docs: dict[str, Any] = {}
        self.expires_at: dict[str, float] = {}
        self.fail_reads = False
        self.fail_writes = False
        self.writes: list[str] = []

    def _live(self, key: str) -> bool:
        if key not in self.docs:
            return False
        deadline = self.expires_at.get(key)
        if deadline is not None and self.now >= deadline:
            del self.docs[key]
            del self.expires_at[key]
            return False
        return True

    def ttl(self, key: str) -> float | None:
        deadline = self.expires_at.get(key)
        return None if deadline is None else deadline - self.now

    async def get(self, key: str) -> Any | None:
        matches = await self.get_path(key, "$")
        return matches[0] if matches else None

    async def get_path(self, key: str, path: str) -> list[Any] | None:
        if self.fail_reads:
            raise CacheReadFailure(f"Cache read failed for {key}")
        if not self._live(key):
            return None
        doc = self.docs[key]
        if path == "$":
            return [copy.deepcopy(doc)]
        if path.startswith("$[?(@."):
            field, _, raw = path[len("$[?(@.") : -len(")]")].partition("==")
            value = json.loads(raw)
            return [copy.deepcopy(e) for e in doc if isinstance(e, dict) and e.get(field) == value]
        if path.startswith("$[") and path.endswith("]"):
            literal = json.loads(path[2:-1])
            if isinstance(doc, dict) and literal in doc:
                return [copy.deepcopy(doc[literal])]
            return []
        raise AssertionError(f"unsupported path in fake: {path}")

    async def set(self, key: str, document: Any, ttl: int | None = None) -> None:
        if ttl is None:
            await self.set_path(key, "$", document)
            return
        # Document and expiry land together or not at all (MULTI/EXEC).
        if self.fail_writes:
            raise CacheWriteFailure(f"Cache write failed for {key}")
        self.docs[key] = copy.deepcopy(document)
        self.expires_at[key] = self.now + ttl
        self.writes.append(key)

    async def set_path(self, key: str, path: str, document: Any) -> None:
        if self.fail_writes:
            raise CacheWriteFailure(f"Cache write failed for {key}")
        if path != "$":
            raise AssertionError(f"unsupported path in fake: {path}")
        # A plain SET drops any previous expiry.
        self.docs[key] = copy.deepcopy(document)
        self.expires_at.pop(key, None)
        self.writes.append(key)

    async def expire(self, key: str, seconds: int) -> None:
        if self.fail_writes:
            raise CacheWriteFailure(f"Cache expire failed for {key}")
        if key in self.docs:
            self.expires_at[key] = self.now + seconds


class FakePriceSource:
    def __init__(self) -> None:
        self.table: dict[str, Any] = copy.deepcopy(PRICE_TABLE)
        self.rates: dict[str, Any] = dict(CURRENCY_RATES)
        self.price_calls = 0
        self.rate_calls = 0
        self.error: Exception | None = None

    async def fetch_price_table(self) -> dict[str, Any]:
        self.price_calls += 1
        if self.error is not None:
            raise self.error
        return copy.deepcopy(self.table)

    async def fetch_currency_rates(self) -> dict[str, float]:
        self.rate_calls += 1
        if self.error is not None:
            raise self.error
        return parse_currency_rates(self.rates)


class FakeCatalogSource:
    def __init__(self) -> None:
        self.catalogs: dict[str, list[dict[str, Any]]] = copy.deepcopy(CATALOGS)
        self.calls: list[str] = []
        self.error: Exception | None = None

    async def fetch_catalog(self, category: str) -> list[dict[str, Any]]:
        self.calls.append(category)
        if self.error is not None:
            raise self.error
        return copy.deepcopy(self.catalogs[category])


class FakeSearchIndex:
    def __init__(self) -> None:
        self.rows: set[str] = set()
        self.resync_calls = 0
        self.fail = False

    async def resync(self, keys) -> int:
        self.resync_calls += 1
        if self.fail:
            raise IndexSyncFailure("Item index resync failed: OperationalError")
        self.rows = set(keys)
        return len(self.rows)

    async def suggest(self, query_text: str, limit: int = 5) -> list[str]:
        tokens = query_text.lower().split()
        if not tokens:
            return []
        hits = [
            name
            for name in sorted(self.rows)
            if all(any(word.startswith(t) for word in name.lower().replace("|", " ").split()) for t in tokens)
        ]
        return hits[:limit]


@pytest.fixture
def document_cache() -> FakeDocumentCache:
    return FakeDocumentCache()


@pytest.fixture
def price_source() -> FakePriceSource:
    return FakePriceSource()


@pytest.fixture
def catalog_source() -> FakeCatalogSource:
    return FakeCatalogSource()


@pytest.fixture
def search_index() -> FakeSearchIndex:
    return FakeSearchIndex()


@pytest.fixture
def price_cache(document_cache, price_source, search_index) -> PriceCacheManager:
    return PriceCacheManager(document_cache, price_source, search_index)


@pytest.fixture
def catalog_cache(document_cache, catalog_source) -> CatalogCacheManager:
    return CatalogCacheManager(document_cache, catalog_source)


@pytest.fixture
def valuation(price_cache) -> ValuationService:
    return ValuationService(price_cache)
