"""FastAPI dependency providers.

Components are built once in the application lifespan and stored on
`app.state`; routes receive them through these providers. Tests swap them
with `app.dependency_overrides`.
"""

from fastapi import Request

from skinvest.services.catalog_cache import CatalogCacheManager
from skinvest.services.price_cache import PriceCacheManager
from skinvest.services.search_index import SearchIndexSync
from skinvest.services.valuation import ValuationService


def _component(request: Request, name: str):
    component = getattr(request.app.state, name, None)
    if component is None:
        raise RuntimeError(f"{name} not initialized. Is the application lifespan running?")
    return component


def get_price_cache(request: Request) -> PriceCacheManager:
    return _component(request, "price_cache")


def get_catalog_cache(request: Request) -> CatalogCacheManager:
    return _component(request, "catalog_cache")


def get_search_index(request: Request) -> SearchIndexSync:
    return _component(request, "search_index")


def get_valuation(request: Request) -> ValuationService:
    return _component(request, "valuation")
