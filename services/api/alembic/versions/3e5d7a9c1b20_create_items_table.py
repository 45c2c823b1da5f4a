"""create_items_table

Revision ID: 3e5d7a9c1b20
Revises:
Create Date: 2026-10-18
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3e5d7a9c1b20"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "items",
        sa.Column("market_hash_name", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("market_hash_name"),
    )

    # Full-text index for the prefix suggestion query ('simple' config: no stemming).
    op.execute(
        "CREATE INDEX ix_items_market_hash_name_tsv ON items "
        "USING gin (to_tsvector('simple', market_hash_name))"
    )


def downgrade() -> None:
    op.drop_index("ix_items_market_hash_name_tsv", table_name="items")
    op.drop_table("items")
