"""Storage adapters: SQLAlchemy event sink and diskcache requirements cache."""
