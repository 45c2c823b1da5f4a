"""Failure kinds raised by the price & catalog cache layer.

Every class carries a stable ``code`` and the HTTP status the API shell maps
it to. "Not found" outcomes are plain ``None`` results inside the layer, so
there is no exception for a missing icon: ``CatalogCacheManager.get_icon``
returns ``None`` and the icon route answers 404. ``ItemNotFound`` exists for
callers that need a validation-style rejection.
"""


class CacheLayerError(RuntimeError):
    """Base class for all cache layer failures."""

    code = "CACHE_LAYER_ERROR"
    status_code = 500

    def __init__(self, message: str, *, detail: dict[str, object] | None = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class SourceFetchFailure(CacheLayerError):
    """Remote endpoint unreachable, timed out or answered non-2xx."""

    code = "SOURCE_FETCH_FAILED"
    status_code = 502


class SourceParseFailure(CacheLayerError):
    """Remote payload was malformed JSON or had an unexpected shape."""

    code = "SOURCE_PARSE_FAILED"
    status_code = 502


class CacheReadFailure(CacheLayerError):
    code = "CACHE_READ_FAILED"
    status_code = 503


class CacheWriteFailure(CacheLayerError):
    code = "CACHE_WRITE_FAILED"
    status_code = 503


class IndexSyncFailure(CacheLayerError):
    """Search index could not be rebuilt or queried."""

    code = "INDEX_SYNC_FAILED"
    status_code = 503


class ItemNotFound(CacheLayerError):
    """Item is not a key of the authoritative price table."""

    code = "ITEM_NOT_FOUND"
    status_code = 404

    def __init__(self, market_hash_name: str):
        super().__init__(
            f"Unknown item: {market_hash_name}",
            detail={"marketHashName": market_hash_name},
        )
        self.market_hash_name = market_hash_name
