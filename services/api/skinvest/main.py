"""FastAPI application entry point.

Skinvest API - price, icon and search backend for a CS2 skin investment tracker.
"""

from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from skinvest.routes import api_router
from skinvest.schemas import ErrorDetail, ErrorResponse
from skinvest.services.catalog_cache import CatalogCacheManager
from skinvest.services.errors import CacheLayerError
from skinvest.services.price_cache import PriceCacheManager
from skinvest.services.search_index import SearchIndexSync
from skinvest.services.sources import CatalogSourceClient, PriceSourceClient
from skinvest.services.valuation import ValuationService
from skinvest.settings import get_settings
from skinvest.stores.postgres import init_db
from skinvest.stores.redis import DocumentCache, close_redis, create_redis_client

logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Builds the shared handles (Redis, Postgres, HTTP clients) once and wires
    the cache layer components onto `app.state`.
    """
    # Startup
    db = init_db()
    try:
        await db.ping()
        logger.info("Postgres connected")
    except Exception:
        logger.exception("Postgres init failed")

    # The client reconnects lazily, so a Redis outage at boot only degrades
    # requests until Redis is back.
    redis_client = create_redis_client()
    try:
        await redis_client.ping()
        logger.info("Redis connected")
    except Exception:
        logger.exception("Redis init failed")

    price_source = PriceSourceClient()
    catalog_source = CatalogSourceClient()

    cache = DocumentCache(redis_client)
    search_index = SearchIndexSync(db)
    price_cache = PriceCacheManager(cache, price_source, search_index)

    app.state.search_index = search_index
    app.state.price_cache = price_cache
    app.state.catalog_cache = CatalogCacheManager(cache, catalog_source)
    app.state.valuation = ValuationService(price_cache)

    yield

    # Shutdown
    await price_source.close()
    await catalog_source.close()
    await close_redis(redis_client)
    await db.close()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Skin prices, icons and item search for investment tracking",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Authorization", "Content-Type"],
    )

    @app.exception_handler(CacheLayerError)
    async def cache_layer_exception_handler(request: Request, exc: CacheLayerError) -> JSONResponse:
        """Render cache layer failures with their stable error code."""
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.code} - {exc.message}")
        body = ErrorResponse(error=ErrorDetail(code=exc.code, message=exc.message, detail=exc.detail))
        return JSONResponse(status_code=exc.status_code, content=body.model_dump())

    # Exception handler for structured error format
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler returning structured error format."""
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": str(exc) if settings.debug else "Internal server error",
                    "detail": None,
                }
            },
        )

    # Health check endpoint
    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, bool]:
        """Health check endpoint."""
        return {"ok": True}

    # Include API routes
    app.include_router(api_router)

    return app


# Application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "skinvest.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
