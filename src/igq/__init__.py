"""Fluent builder and CLI for IGDB queries."""

from igq.api.query import Equality, Filter, OrderBy, QueryBuilder

__version__ = "0.1.0"

__all__ = ["Equality", "Filter", "OrderBy", "QueryBuilder", "__version__"]
