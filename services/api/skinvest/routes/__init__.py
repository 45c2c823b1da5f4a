"""API routes."""

from fastapi import APIRouter

from skinvest.routes import admin, items, prices

api_router = APIRouter()

# Prices, currencies, inventory price check
api_router.include_router(prices.router, prefix="/v1", tags=["prices"])

# Item suggestions, existence, icons
api_router.include_router(items.router, prefix="/v1/items", tags=["items"])

# Admin endpoints (cache refresh)
api_router.include_router(admin.router, prefix="/v1/admin", tags=["admin"])
