"""HTTP clients for the remote price, currency and catalog sources.

Sources:
- csgotrader price table: one JSON object, market hash name -> price record
  (tens of thousands of keys, several MB)
- csgotrader exchange rates: JSON object, currency code -> rate vs USD
- ByMykel CSGO-API catalogs: one JSON array per category of {name, image, ...}

The clients are stateless apart from the pooled httpx client. Every request
is bounded by the configured timeout; timeouts, transport errors and non-2xx
answers become SourceFetchFailure, bad payloads become SourceParseFailure.
Nothing is retried here.
"""

import logging
from typing import Any

import httpx

from skinvest.services.errors import SourceFetchFailure, SourceParseFailure
from skinvest.settings import get_settings

logger = logging.getLogger("uvicorn.error")

# Currencies the API accepts for investments and conversions.
SUPPORTED_CURRENCIES = ("USD", "EUR", "CNY")

CATEGORIES = ("skins", "stickers", "crates", "agents", "patches")


class _JSONSourceClient:
    """Shared GET-and-decode logic for the remote JSON sources."""

    def __init__(self, http_client: httpx.AsyncClient | None = None, timeout: float | None = None):
        self._timeout = timeout or get_settings().source_timeout_seconds
        self._http_client = http_client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            # httpx decodes gzip by default but only follows redirects on request.
            self._http_client = httpx.AsyncClient(timeout=self._timeout, follow_redirects=True)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def _get_json(self, url: str, *, source: str) -> Any:
        client = await self._get_client()
        try:
            resp = await client.get(url)
        except httpx.TimeoutException as e:
            logger.error(f"{source} request timed out: {url}")
            raise SourceFetchFailure(f"{source} request timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"{source} request failed: {url} - {e}")
            raise SourceFetchFailure(f"{source} request failed") from e

        if resp.status_code != 200:
            logger.error(f"{source} API error: {resp.status_code} - {resp.text[:200]}")
        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise SourceFetchFailure(
                f"{source} answered {resp.status_code}",
                detail={"status": resp.status_code},
            ) from e

        try:
            return resp.json()
        except ValueError as e:
            logger.error(f"{source} returned malformed JSON ({len(resp.content)} bytes)")
            raise SourceParseFailure(f"{source} returned malformed JSON") from e


class PriceSourceClient(_JSONSourceClient):
    """Client for the global price table and the currency-rate table."""

    def __init__(
        self,
        prices_url: str | None = None,
        rates_url: str | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ):
        super().__init__(http_client=http_client, timeout=timeout)
        settings = get_settings()
        self.prices_url = prices_url or settings.price_source_url
        self.rates_url = rates_url or settings.currency_source_url

    async def fetch_price_table(self) -> dict[str, Any]:
        """Fetch the full price table.

        Returns:
            Mapping of market hash name to raw price record. Never empty.
        """
        logger.info(f"Fetching price table from {self.prices_url}")
        data = await self._get_json(self.prices_url, source="Price source")
        if not isinstance(data, dict):
            raise SourceParseFailure("Price table is not a JSON object")
        if not data:
            raise SourceParseFailure("Price table is empty")
        return data

    async def fetch_currency_rates(self) -> dict[str, float]:
        """Fetch exchange rates, restricted to SUPPORTED_CURRENCIES."""
        logger.info(f"Fetching currency rates from {self.rates_url}")
        data = await self._get_json(self.rates_url, source="Currency source")
        return parse_currency_rates(data)


def parse_currency_rates(data: Any) -> dict[str, float]:
    """Pick the supported currencies out of a code -> rate object.

    USD is the base and defaults to 1.0; every other supported currency must
    be present with a positive rate.
    """
    if not isinstance(data, dict):
        raise SourceParseFailure("Currency rates are not a JSON object")

    upper = {str(k).upper(): v for k, v in data.items()}
    upper.setdefault("USD", 1.0)

    rates: dict[str, float] = {}
    for code in SUPPORTED_CURRENCIES:
        try:
            rate = float(upper[code])
        except KeyError as e:
            raise SourceParseFailure(f"Missing rate for {code}") from e
        except (TypeError, ValueError) as e:
            raise SourceParseFailure(f"Invalid rate for {code}: {upper[code]!r}") from e
        if rate <= 0:
            raise SourceParseFailure(f"Invalid rate for {code}: {rate}")
        rates[code] = rate
    return rates


class CatalogSourceClient(_JSONSourceClient):
    """Client for the per-category item catalogs."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ):
        super().__init__(http_client=http_client, timeout=timeout)
        self.base_url = (base_url or get_settings().catalog_source_url).rstrip("/")

    async def fetch_catalog(self, category: str) -> list[dict[str, Any]]:
        """Fetch one category catalog.

        Args:
            category: One of CATEGORIES.

        Returns:
            Ordered list of item records, each with at least `name` and `image`.
        """
        if category not in CATEGORIES:
            raise ValueError(f"Unknown catalog category: {category}")

        url = f"{self.base_url}/{category}.json"
        logger.info(f"Fetching {category} catalog from {url}")
        data = await self._get_json(url, source="Catalog source")
        if not isinstance(data, list):
            raise SourceParseFailure(f"{category} catalog is not a JSON array")
        return [entry for entry in data if isinstance(entry, dict)]
