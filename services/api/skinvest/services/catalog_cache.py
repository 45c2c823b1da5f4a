"""Cache-aside manager for item catalogs and icon lookups.

Icons are resolved by walking the categories in a fixed order (skins,
stickers, crates, agents, patches) and running a name filter against each
cached catalog. The first category with a match wins.

Skin catalogs list the base weapon skin only ("AK-47 | Redline"), while market
hash names carry wear and StatTrak qualifiers
("StatTrak™ AK-47 | Redline (Field-Tested)"), so skin lookups normalize the
name first.
"""

import logging
import re

from skinvest.services.errors import CacheReadFailure, SourceParseFailure
from skinvest.services.sources import CATEGORIES, CatalogSourceClient
from skinvest.stores.redis import TTL_CATALOG, DocumentCache, catalog_key, field_equals_path

logger = logging.getLogger("uvicorn.error")

# "StatTrak™ " with the trademark sign as-is, mis-decoded from UTF-8 as
# latin-1/cp1252 ("â„¢"), or dropped entirely.
_STATTRAK_RE = re.compile(r"StatTrak(?:™|â„¢|â\u0084¢)?\s*")

# Trailing "(Field-Tested)" plus the separator in front of it.
_WEAR_SUFFIX_RE = re.compile(r"\s*\([^()]*\)\s*$")


def normalize_skin_name(market_hash_name: str) -> str:
    """Reduce a skin's market hash name to its catalog name.

    Only names with a trailing parenthesized wear are rewritten, e.g.
    "StatTrak™ AK-47 | Redline (Field-Tested)" -> "AK-47 | Redline".
    Names without a wear suffix (vanilla knives, graffiti) are returned as-is.
    """
    if not _WEAR_SUFFIX_RE.search(market_hash_name):
        return market_hash_name
    name = _WEAR_SUFFIX_RE.sub("", market_hash_name)
    return _STATTRAK_RE.sub("", name).strip()


class CatalogCacheManager:
    """Owns the `catalog-<category>` cache documents."""

    def __init__(self, cache: DocumentCache, source: CatalogSourceClient):
        self._cache = cache
        self._source = source

    async def get_icon(self, market_hash_name: str) -> str | None:
        """Get the image URL of an item.

        Returns:
            Icon URL, or None if no category catalog contains the item.
        """
        for category in CATEGORIES:
            icon = await self._lookup_icon(category, market_hash_name)
            if icon:
                return icon
        logger.info(f"No icon found for {market_hash_name!r}")
        return None

    async def _lookup_icon(self, category: str, market_hash_name: str) -> str | None:
        name = normalize_skin_name(market_hash_name) if category == "skins" else market_hash_name
        key = catalog_key(category)
        path = field_equals_path("name", name)

        matches = await self._cache.get_path(key, path)
        if matches is None:
            await self.refresh_catalog(category)
            matches = await self._cache.get_path(key, path)
            if matches is None:
                raise CacheReadFailure(f"{category} catalog vanished right after refresh")

        if not matches:
            return None

        image = matches[0].get("image") if isinstance(matches[0], dict) else None
        if not isinstance(image, str) or not image:
            raise SourceParseFailure(
                f"{category} catalog entry for {name} has no image",
                detail={"category": category, "name": name},
            )
        return image

    async def refresh_catalog(self, category: str) -> int:
        """Fetch one category catalog and replace the cached copy.

        Returns:
            Number of entries in the new catalog.
        """
        logger.info(f"Catalog cache MISS for {category}, fetching from source...")
        entries = await self._source.fetch_catalog(category)

        key = catalog_key(category)
        await self._cache.set(key, entries, TTL_CATALOG)
        logger.info(f"{category} catalog cached: {len(entries)} entries")
        return len(entries)
