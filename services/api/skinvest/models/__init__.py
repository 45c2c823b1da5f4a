"""SQLAlchemy ORM models.

Models represent database tables:
- items: search index of known market hash names
"""

from skinvest.models.item import Item

__all__ = ["Item"]
