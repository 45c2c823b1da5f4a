"""Tests for catalog caching and icon resolution."""

import pytest

from skinvest.services.catalog_cache import normalize_skin_name
from skinvest.services.errors import SourceFetchFailure, SourceParseFailure
from skinvest.stores.redis import TTL_CATALOG, catalog_key


@pytest.mark.parametrize(
    "market_hash_name, expected",
    [
        ("AK-47 | Redline (Field-Tested)", "AK-47 | Redline"),
        ("StatTrak™ AK-47 | Redline (Field-Tested)", "AK-47 | Redline"),
        ("StatTrakâ„¢ AK-47 | Redline (Field-Tested)", "AK-47 | Redline"),
        ("★ StatTrak™ Karambit | Doppler (Factory New)", "★ Karambit | Doppler"),
        ("★ Karambit", "★ Karambit"),
        ("Revolution Case", "Revolution Case"),
    ],
)
def test_normalize_skin_name(market_hash_name: str, expected: str) -> None:
    assert normalize_skin_name(market_hash_name) == expected


@pytest.mark.asyncio
async def test_skin_icon_resolves_through_base_name(catalog_cache, catalog_source, document_cache):
    plain = await catalog_cache.get_icon("AK-47 | Redline (Field-Tested)")
    stattrak = await catalog_cache.get_icon("StatTrak™ AK-47 | Redline (Field-Tested)")

    assert plain == "https://cdn.example/ak47_redline.png"
    assert stattrak == plain
    # Found in the first category; later catalogs are never loaded.
    assert catalog_source.calls == ["skins"]
    assert document_cache.ttl(catalog_key("skins")) == TTL_CATALOG


@pytest.mark.asyncio
async def test_categories_are_searched_in_order(catalog_cache, catalog_source):
    icon = await catalog_cache.get_icon("Revolution Case")

    assert icon == "https://cdn.example/revolution.png"
    assert catalog_source.calls == ["skins", "stickers", "crates"]


@pytest.mark.asyncio
async def test_sticker_names_are_not_normalized(catalog_cache):
    # The "(Foil)" suffix is part of the sticker's catalog name.
    icon = await catalog_cache.get_icon("Sticker | Crown (Foil)")
    assert icon == "https://cdn.example/crown.png"


@pytest.mark.asyncio
async def test_unknown_item_returns_none_after_all_categories(catalog_cache, catalog_source):
    assert await catalog_cache.get_icon("Music Kit | Daniel Sadowski, Crimson Assault") is None
    assert catalog_source.calls == ["skins", "stickers", "crates", "agents", "patches"]

    # Catalogs are cached now, including the empty ones.
    assert await catalog_cache.get_icon("Music Kit | Daniel Sadowski, Crimson Assault") is None
    assert len(catalog_source.calls) == 5


@pytest.mark.asyncio
async def test_expired_catalog_is_refetched(catalog_cache, catalog_source, document_cache):
    await catalog_cache.get_icon("AK-47 | Redline (Field-Tested)")

    document_cache.now = TTL_CATALOG - 1
    await catalog_cache.get_icon("AK-47 | Redline (Field-Tested)")
    assert catalog_source.calls == ["skins"]

    document_cache.now = TTL_CATALOG + 1
    await catalog_cache.get_icon("AK-47 | Redline (Field-Tested)")
    assert catalog_source.calls == ["skins", "skins"]


@pytest.mark.asyncio
async def test_entry_without_image_is_parse_failure(catalog_cache, catalog_source):
    catalog_source.catalogs["skins"].append({"id": "skin-9", "name": "AWP | Asiimov"})

    with pytest.raises(SourceParseFailure):
        await catalog_cache.get_icon("AWP | Asiimov (Battle-Scarred)")


@pytest.mark.asyncio
async def test_fetch_failure_propagates_and_caches_nothing(catalog_cache, catalog_source, document_cache):
    catalog_source.error = SourceFetchFailure("Catalog source request timed out")

    with pytest.raises(SourceFetchFailure):
        await catalog_cache.get_icon("AK-47 | Redline (Field-Tested)")
    assert document_cache.docs == {}


@pytest.mark.asyncio
async def test_refresh_catalog_replaces_document(catalog_cache, catalog_source, document_cache):
    await catalog_cache.refresh_catalog("crates")
    catalog_source.catalogs["crates"] = [
        {"id": "crate-2", "name": "Kilowatt Case", "image": "https://cdn.example/kilowatt.png"},
    ]

    count = await catalog_cache.refresh_catalog("crates")

    assert count == 1
    assert await catalog_cache.get_icon("Revolution Case") is None
    assert await catalog_cache.get_icon("Kilowatt Case") == "https://cdn.example/kilowatt.png"
