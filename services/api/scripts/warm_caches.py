#!/usr/bin/env python3
"""Cache warm-up job (deploys / Railway Cron).

Behavior:
- Refetch the price table, replace the cached copy and rebuild the item index
- Prime currency rates (fetched only when the cached copy expired)
- Refetch the selected category catalogs

Run (local / Railway):
  cd services/api
  python -m scripts.warm_caches

Optional env vars:
  WARM_CATEGORIES="skins,stickers,crates,agents,patches"
  WARM_SKIP_PRICES=1
"""

import asyncio
import os
import sys


# Ensure imports work when executed as a script/module
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from skinvest.services.catalog_cache import CatalogCacheManager  # noqa: E402
from skinvest.services.price_cache import PriceCacheManager  # noqa: E402
from skinvest.services.search_index import SearchIndexSync  # noqa: E402
from skinvest.services.sources import CATEGORIES, CatalogSourceClient, PriceSourceClient  # noqa: E402
from skinvest.stores.postgres import init_db  # noqa: E402
from skinvest.stores.redis import DocumentCache, close_redis, init_redis  # noqa: E402


def _parse_csv_env(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name, "")
    if not raw.strip():
        return default
    return [p.strip() for p in raw.split(",") if p.strip()]


async def main() -> None:
    # Same wiring as the API lifespan, but for a one-off run
    db = init_db()
    await db.ping()
    redis_client = await init_redis()
    price_source = PriceSourceClient()
    catalog_source = CatalogSourceClient()

    try:
        cache = DocumentCache(redis_client)
        prices = PriceCacheManager(cache, price_source, SearchIndexSync(db))
        catalogs = CatalogCacheManager(cache, catalog_source)

        categories = [c for c in _parse_csv_env("WARM_CATEGORIES", list(CATEGORIES)) if c in CATEGORIES]

        item_count = 0
        if not os.getenv("WARM_SKIP_PRICES"):
            item_count = await prices.refresh_price_table()
        rates = await prices.get_currency_rates()

        catalog_counts: dict[str, int] = {}
        for category in categories:
            catalog_counts[category] = await catalogs.refresh_catalog(category)

        # Final output for Railway logs (single JSON-ish blob)
        print(
            {
                "ok": True,
                "prices": item_count,
                "rates": rates.model_dump(),
                "catalogs": catalog_counts,
            }
        )
    finally:
        await price_source.close()
        await catalog_source.close()
        await close_redis(redis_client)
        await db.close()


if __name__ == "__main__":
    asyncio.run(main())
