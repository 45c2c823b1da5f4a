"""Item search index model.

One row per market hash name known to the price table. The table is a
projection of the cached price table's key set and is rebuilt wholesale on
every price refresh; it is used for name suggestions only, never for
existence checks.
"""

from sqlalchemy import Index, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from skinvest.stores.postgres import Base

# Text search configuration shared by the index and the suggestion query.
SEARCH_CONFIG = "simple"


class Item(Base):
    """Known item name (e.g., "AK-47 | Redline (Field-Tested)")."""

    __tablename__ = "items"

    market_hash_name: Mapped[str] = mapped_column(Text, primary_key=True)

    def __repr__(self) -> str:
        return f"<Item {self.market_hash_name}>"


# GIN index backing the full-text suggestion query.
Index(
    "ix_items_market_hash_name_tsv",
    func.to_tsvector(SEARCH_CONFIG, Item.market_hash_name),
    postgresql_using="gin",
)
