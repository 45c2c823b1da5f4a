"""Item endpoints.

GET /v1/items/suggest              - Up to 5 item names for a partial query
GET /v1/items/exists               - Whether an item is in the price table
GET /v1/items/icon/{name}          - Redirect to the item's image
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import RedirectResponse

from skinvest.dependencies import get_catalog_cache, get_price_cache, get_search_index
from skinvest.schemas import ItemExistsResponse, ItemSuggestions
from skinvest.services.catalog_cache import CatalogCacheManager
from skinvest.services.price_cache import PriceCacheManager
from skinvest.services.search_index import SUGGEST_LIMIT, SearchIndexSync

router = APIRouter()


@router.get("/suggest", response_model=ItemSuggestions)
async def suggest_items(
    q: str = Query(
        default="",
        max_length=200,
        description="Partial item name; every word is matched as a prefix",
        examples=["ak redl"],
    ),
    index: SearchIndexSync = Depends(get_search_index),
) -> ItemSuggestions:
    items = await index.suggest(q, limit=SUGGEST_LIMIT)
    return ItemSuggestions(query=q, items=items)


@router.get("/exists", response_model=ItemExistsResponse, response_model_by_alias=True)
async def item_exists(
    market_hash_name: str = Query(min_length=1, examples=["AK-47 | Redline (Field-Tested)"]),
    prices: PriceCacheManager = Depends(get_price_cache),
) -> ItemExistsResponse:
    exists = await prices.item_exists(market_hash_name)
    return ItemExistsResponse(market_hash_name=market_hash_name, exists=exists)


@router.get("/icon/{market_hash_name:path}")
async def get_icon(
    market_hash_name: str,
    catalogs: CatalogCacheManager = Depends(get_catalog_cache),
) -> RedirectResponse:
    """Redirect to the icon of an item (307)."""
    icon_url = await catalogs.get_icon(market_hash_name)
    if icon_url is None:
        raise HTTPException(status_code=404, detail=f"No icon for item: {market_hash_name}")
    return RedirectResponse(url=icon_url)
