"""Cache-aside manager for the global price table and currency rates.

Lookup flow (price record):
1. Path read `$["<market hash name>"]` on the cached price table
2. Key absent (cold / expired) -> refresh the whole table, read again once
3. Empty match on a present table -> the item is unknown (None)

Refresh flow:
1. Fetch the full table from the price source
2. Replace the cached document wholesale, TTL 8 hours
3. Rebuild the item search index from the new key set (best effort)

A failed fetch never touches the cached document, so a previously good table
keeps being served until it expires. Concurrent misses may refresh twice;
both writers store the same upstream document, last one wins.
"""

import logging
from typing import Any

from pydantic import ValidationError

from skinvest.schemas import CurrencyRates, PriceRecord
from skinvest.services.errors import CacheReadFailure, IndexSyncFailure, SourceParseFailure
from skinvest.services.search_index import SearchIndexSync
from skinvest.services.sources import PriceSourceClient
from skinvest.stores.redis import (
    KEY_CURRENCY_RATES,
    KEY_PRICE_TABLE,
    TTL_CURRENCY_RATES,
    TTL_PRICE_TABLE,
    DocumentCache,
    literal_key_path,
)

logger = logging.getLogger("uvicorn.error")


class PriceCacheManager:
    """Owns the `price-table` and `currency-rates` cache documents."""

    def __init__(self, cache: DocumentCache, source: PriceSourceClient, index: SearchIndexSync):
        self._cache = cache
        self._source = source
        self._index = index

    async def get_price_record(self, market_hash_name: str) -> PriceRecord | None:
        """Get the price record of one item.

        Args:
            market_hash_name: Exact item name, e.g. "AK-47 | Redline (Field-Tested)".

        Returns:
            PriceRecord, or None if the item is not in the price table.
        """
        path = literal_key_path(market_hash_name)
        matches = await self._cache.get_path(KEY_PRICE_TABLE, path)

        if matches is None:
            logger.info(f"Price table cache MISS (lookup of {market_hash_name!r})")
            await self.refresh_price_table()
            matches = await self._cache.get_path(KEY_PRICE_TABLE, path)
            if matches is None:
                # Expired or evicted between write and read; don't loop.
                raise CacheReadFailure("Price table vanished right after refresh")

        if not matches or matches[0] is None:
            return None
        return _to_price_record(market_hash_name, matches[0])

    async def item_exists(self, market_hash_name: str) -> bool:
        """Whether the item is a key of the price table."""
        return await self.get_price_record(market_hash_name) is not None

    async def refresh_price_table(self) -> int:
        """Fetch the remote price table and replace the cached copy.

        Returns:
            Number of items in the new table.
        """
        table = await self._source.fetch_price_table()

        await self._cache.set(KEY_PRICE_TABLE, table, TTL_PRICE_TABLE)
        logger.info(f"Price table cached: {len(table)} items, TTL {TTL_PRICE_TABLE}s")

        # The refreshed table is already being served; an index failure only
        # degrades suggestions until the next refresh.
        try:
            await self._index.resync(table.keys())
        except IndexSyncFailure:
            logger.exception("Item index resync failed after price refresh")

        return len(table)

    async def get_currency_rates(self) -> CurrencyRates:
        """Get USD-based exchange rates, fetching them on cache miss."""
        cached = await self._cache.get(KEY_CURRENCY_RATES)
        if cached is not None:
            try:
                return CurrencyRates.model_validate(cached)
            except ValidationError as e:
                raise CacheReadFailure("Cached currency rates are malformed") from e

        logger.info("Currency rates cache MISS, fetching from source...")
        rates = await self._source.fetch_currency_rates()

        await self._cache.set(KEY_CURRENCY_RATES, rates, TTL_CURRENCY_RATES)
        logger.info(f"Currency rates cached: {rates}")

        return CurrencyRates.model_validate(rates)


def _to_price_record(market_hash_name: str, raw: Any) -> PriceRecord:
    try:
        return PriceRecord.model_validate(raw)
    except ValidationError as e:
        raise SourceParseFailure(
            f"Malformed price record for {market_hash_name}",
            detail={"marketHashName": market_hash_name},
        ) from e
