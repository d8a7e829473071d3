"""Infrastructure - store adapters (MongoDB, SQLAlchemy) and logging setup."""
