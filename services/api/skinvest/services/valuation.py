"""Valuation facade used by the investment and inventory endpoints.

Wraps PriceCacheManager lookups into the shapes the API returns and owns the
monetary display rule for investment costs (always 2 decimals, half-up).
"""

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from skinvest.schemas import PriceCheckLine, PriceCheckResponse, PricedLine, PriceRecord
from skinvest.services.errors import ItemNotFound
from skinvest.services.price_cache import PriceCacheManager

# Cache-Control max-age for price check responses (30 minutes).
PRICE_CHECK_MAX_AGE = 60 * 30

_CENTS = Decimal("0.01")


def display_cost(value: Decimal | float | int | str) -> Decimal:
    """Rescale a stored cost to exactly two fractional digits.

    Floats go through `str` first so 12.345 rounds as written (12.35), not as
    its binary approximation.
    """
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)


class ValuationService:
    def __init__(self, prices: PriceCacheManager):
        self._prices = prices

    async def price_of(self, market_hash_name: str) -> PriceRecord | None:
        return await self._prices.get_price_record(market_hash_name)

    async def ensure_item_exists(self, market_hash_name: str) -> None:
        """Reject unknown items before an investment is created.

        Raises:
            ItemNotFound: If the item is not in the price table.
        """
        if not await self._prices.item_exists(market_hash_name):
            raise ItemNotFound(market_hash_name)

    async def price_check(self, lines: Sequence[PriceCheckLine]) -> PriceCheckResponse:
        """Price every inventory line and sum the item counts.

        Lines are priced one after another so a cold cache is refreshed by
        the first lookup only. Duplicate names are kept as separate lines.
        """
        items: list[PricedLine] = []
        for line in lines:
            items.append(
                PricedLine(
                    market_hash_name=line.market_hash_name,
                    count=line.count,
                    prices=await self.price_of(line.market_hash_name),
                )
            )
        return PriceCheckResponse(
            items=items,
            total_count=sum(line.count for line in lines),
        )
