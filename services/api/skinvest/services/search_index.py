"""Search index over known item names.

The `items` table mirrors the key set of the cached price table. It is rebuilt
from scratch after every price refresh (delete everything, bulk insert) inside
one transaction, so readers see either the old set or the new one.

Suggestions use Postgres full-text search: every token of the query becomes a
prefix match (`ak:* & redl:*`), results are ranked with ts_rank.
"""

from collections.abc import Iterable
import logging

from sqlalchemy import delete, insert, text
from sqlalchemy.exc import SQLAlchemyError

from skinvest.models import Item
from skinvest.models.item import SEARCH_CONFIG
from skinvest.services.errors import IndexSyncFailure
from skinvest.stores.postgres import Database

logger = logging.getLogger("uvicorn.error")

SUGGEST_LIMIT = 5

# asyncpg caps bind parameters per statement; keep batches well under it.
INSERT_BATCH_SIZE = 5000

# The query text is tokenized by Postgres itself, so user input never has to
# be escaped into tsquery syntax.
_SUGGEST_SQL = text(
    f"""
    with search as (
        select to_tsquery('{SEARCH_CONFIG}', string_agg(quote_literal(lexeme) || ':*', ' & ' order by positions)) as query
        from unnest(to_tsvector('{SEARCH_CONFIG}', :query))
    )
    select items.market_hash_name
    from items, search
    where to_tsvector('{SEARCH_CONFIG}', items.market_hash_name) @@ search.query
    order by
        ts_rank(to_tsvector('{SEARCH_CONFIG}', items.market_hash_name), search.query) desc,
        length(items.market_hash_name) asc,
        items.market_hash_name asc
    limit :limit
    """
)


class SearchIndexSync:
    """Sole writer of the `items` table."""

    def __init__(self, db: Database):
        self._db = db

    async def resync(self, keys: Iterable[str]) -> int:
        """Replace all rows with one row per distinct key.

        Args:
            keys: Market hash names from the freshly fetched price table.

        Returns:
            Number of rows inserted.
        """
        names = list(dict.fromkeys(keys))
        try:
            async with self._db.session() as session:
                await session.execute(delete(Item))
                for start in range(0, len(names), INSERT_BATCH_SIZE):
                    batch = names[start : start + INSERT_BATCH_SIZE]
                    await session.execute(
                        insert(Item),
                        [{"market_hash_name": name} for name in batch],
                    )
        except SQLAlchemyError as e:
            raise IndexSyncFailure(f"Item index resync failed: {e.__class__.__name__}") from e

        logger.info(f"Item index rebuilt: {len(names)} names")
        return len(names)

    async def suggest(self, query_text: str, limit: int = SUGGEST_LIMIT) -> list[str]:
        """Return up to `limit` (max 5) item names best matching a partial query.

        Example: "ak redl" -> ["AK-47 | Redline (Field-Tested)", ...]
        """
        query_text = query_text.strip()
        if not query_text:
            return []
        limit = max(1, min(limit, SUGGEST_LIMIT))

        try:
            async with self._db.session() as session:
                result = await session.execute(_SUGGEST_SQL, {"query": query_text, "limit": limit})
                return [row[0] for row in result.all()]
        except SQLAlchemyError as e:
            logger.error(f"Item suggestion query failed for q={query_text!r}: {e}")
            raise IndexSyncFailure("Item suggestion query failed") from e
