"""Database metadata - declarative base shared by models and alembic."""
