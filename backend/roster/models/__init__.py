"""ORM Models - SQLAlchemy declarative models for the relational store.

Invariants:
    - All models inherit from Base (db/base.py)
    - Models imported here so Base.metadata is complete for create_all and alembic
"""

from roster.models.item import Item  # noqa: F401
