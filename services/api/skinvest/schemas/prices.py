"""Schemas for prices, currency rates and inventory price checks."""

from pydantic import BaseModel, Field


class SteamPrices(BaseModel):
    """Steam Community Market averages."""

    last_24h: float | None = None
    last_7d: float | None = None
    last_30d: float | None = None
    last_90d: float | None = None


class SkinportPrices(BaseModel):
    suggested_price: float | None = None
    starting_at: float | None = None


class BuffPrice(BaseModel):
    price: float | None = None


class BuffPrices(BaseModel):
    starting_at: BuffPrice | None = None
    highest_order: BuffPrice | None = None


class PriceRecord(BaseModel):
    """Per-item price record as published in the remote price table.

    Every market is optional; sources the API doesn't know about are ignored.
    """

    steam: SteamPrices | None = None
    skinport: SkinportPrices | None = None
    buff163: BuffPrices | None = None


class CurrencyRates(BaseModel):
    """Exchange rates relative to USD (1 USD = rate units of currency)."""

    USD: float = 1.0
    EUR: float
    CNY: float


class PriceCheckLine(BaseModel):
    """One inventory line to price."""

    market_hash_name: str = Field(alias="marketHashName", min_length=1)
    count: int = Field(ge=0)

    model_config = {"populate_by_name": True}


class PriceCheckRequest(BaseModel):
    items: list[PriceCheckLine]


class PricedLine(BaseModel):
    """Price check result for one input line; prices is null for unknown items."""

    market_hash_name: str = Field(alias="marketHashName")
    count: int
    prices: PriceRecord | None = None

    model_config = {"populate_by_name": True}


class PriceCheckResponse(BaseModel):
    items: list[PricedLine]
    total_count: int = Field(alias="totalCount", ge=0)

    model_config = {"populate_by_name": True}


class ItemExistsResponse(BaseModel):
    market_hash_name: str = Field(alias="marketHashName")
    exists: bool

    model_config = {"populate_by_name": True}


class ItemSuggestions(BaseModel):
    """Up to 5 known item names matching a partial query."""

    query: str
    items: list[str] = Field(max_length=5)


class RefreshResponse(BaseModel):
    success: bool
    item_count: int = Field(alias="itemCount", ge=0)

    model_config = {"populate_by_name": True}
