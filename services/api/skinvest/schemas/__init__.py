"""Pydantic schemas for API request/response validation."""

from skinvest.schemas.common import ErrorDetail, ErrorResponse
from skinvest.schemas.prices import (
    BuffPrice,
    BuffPrices,
    CurrencyRates,
    ItemExistsResponse,
    ItemSuggestions,
    PriceCheckLine,
    PriceCheckRequest,
    PriceCheckResponse,
    PricedLine,
    PriceRecord,
    RefreshResponse,
    SkinportPrices,
    SteamPrices,
)

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "BuffPrice",
    "BuffPrices",
    "CurrencyRates",
    "ItemExistsResponse",
    "ItemSuggestions",
    "PriceCheckLine",
    "PriceCheckRequest",
    "PriceCheckResponse",
    "PricedLine",
    "PriceRecord",
    "RefreshResponse",
    "SkinportPrices",
    "SteamPrices",
]
