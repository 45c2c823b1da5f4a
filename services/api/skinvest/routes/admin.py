"""Admin endpoints for cache maintenance.

These endpoints are intended for manual operations (warming caches after a
deploy, forcing a refresh when the upstream published early).
In production, consider adding authentication (API key or admin token).
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from skinvest.dependencies import get_catalog_cache, get_price_cache
from skinvest.schemas import RefreshResponse
from skinvest.services.catalog_cache import CatalogCacheManager
from skinvest.services.price_cache import PriceCacheManager
from skinvest.services.sources import CATEGORIES

router = APIRouter()
logger = logging.getLogger("uvicorn.error")


@router.post("/prices/refresh", response_model=RefreshResponse, response_model_by_alias=True)
async def refresh_prices(
    prices: PriceCacheManager = Depends(get_price_cache),
) -> RefreshResponse:
    """Refetch the price table, replace the cached copy and rebuild the item index."""
    logger.info("Admin: forced price table refresh")
    count = await prices.refresh_price_table()
    return RefreshResponse(success=True, item_count=count)


@router.post(
    "/catalogs/{category}/refresh",
    response_model=RefreshResponse,
    response_model_by_alias=True,
)
async def refresh_catalog(
    category: str,
    catalogs: CatalogCacheManager = Depends(get_catalog_cache),
) -> RefreshResponse:
    """Refetch one category catalog (skins, stickers, crates, agents, patches)."""
    if category not in CATEGORIES:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported category: {category}. Supported: {list(CATEGORIES)}",
        )
    logger.info(f"Admin: forced {category} catalog refresh")
    count = await catalogs.refresh_catalog(category)
    return RefreshResponse(success=True, item_count=count)
