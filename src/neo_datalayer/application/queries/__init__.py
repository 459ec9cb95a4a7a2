"""Local query execution."""

from .query_executor import MISSING, QueryExecutor, QueryResult, get_nested_value
from .local_filter import LocalFilter

__all__ = [
    "QueryExecutor",
    "QueryResult",
    "LocalFilter",
    "get_nested_value",
    "MISSING",
]
