"""Price endpoints.

GET  /v1/prices          - Price record of one item
GET  /v1/currencies      - USD-based exchange rates
POST /v1/prices/check    - Price an inventory (list of name + count)

Routers are thin: call services for business logic.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from skinvest.dependencies import get_price_cache, get_valuation
from skinvest.schemas import CurrencyRates, PriceCheckRequest, PriceCheckResponse, PriceRecord
from skinvest.services.price_cache import PriceCacheManager
from skinvest.services.valuation import PRICE_CHECK_MAX_AGE, ValuationService

router = APIRouter()


@router.get("/prices", response_model=PriceRecord)
async def get_prices(
    market_hash_name: str = Query(
        min_length=1,
        description="Exact market hash name",
        examples=["AK-47 | Redline (Field-Tested)"],
    ),
    valuation: ValuationService = Depends(get_valuation),
) -> PriceRecord:
    """Get Steam / Skinport / Buff163 prices of one item."""
    record = await valuation.price_of(market_hash_name)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Unknown item: {market_hash_name}")
    return record


@router.get("/currencies", response_model=CurrencyRates)
async def get_currencies(
    prices: PriceCacheManager = Depends(get_price_cache),
) -> CurrencyRates:
    """Get exchange rates for the supported currencies."""
    return await prices.get_currency_rates()


@router.post("/prices/check", response_model=PriceCheckResponse, response_model_by_alias=True)
async def price_check(
    body: PriceCheckRequest,
    response: Response,
    valuation: ValuationService = Depends(get_valuation),
) -> PriceCheckResponse:
    """Price every inventory line; unknown items come back with `prices: null`."""
    result = await valuation.price_check(body.items)
    response.headers["Cache-Control"] = f"private, max-age={PRICE_CHECK_MAX_AGE}"
    return result
