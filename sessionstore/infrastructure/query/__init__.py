"""Query-builder facade over the namespaced collection store."""

from sessionstore.infrastructure.query.client import QueryBuilder, QueryClient, parse_columns

__all__ = ["QueryBuilder", "QueryClient", "parse_columns"]
