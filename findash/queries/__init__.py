"""Query package."""

from findash.queries.filters import ALL_CATEGORIES, TransactionFilter, daily_activity

__all__ = ["ALL_CATEGORIES", "TransactionFilter", "daily_activity"]
