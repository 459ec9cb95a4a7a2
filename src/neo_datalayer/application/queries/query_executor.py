"""Query executor.

ONLY record matching - evaluates MongoDB-like query objects against
in-memory records. Pure functions, never mutates its input.

Supported operators:
- Implicit: value -> $eq, list/tuple/set -> $in
- Comparison: $eq, $ne, $gt, $gte, $lt, $lte
- Set: $in, $nin
- Text: $like (case-insensitive substring), $regex
- Range/presence: $between (inclusive), $exists
- Logical: $or, $and

Dotted keys address nested mappings (``{"author.name": "John"}``).

Following maximum separation architecture - one file = one purpose.
"""

import logging
import re
from numbers import Number
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional

logger = logging.getLogger(__name__)

QueryObject = Dict[str, Any]


class _Missing:
    """Marker for a path that does not exist on the record."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()

_SEQUENCE_TYPES = (list, tuple, set, frozenset)


class QueryResult(NamedTuple):
    items: List[Dict[str, Any]]
    total: int


def get_nested_value(path: str, obj: Any) -> Any:
    """Read a dotted path from nested mappings.

    Returns ``MISSING`` when any segment is absent or not a mapping.
    """
    if obj is None or not path or not isinstance(path, str):
        return MISSING

    current = obj
    for key in path.split("."):
        if not isinstance(current, Mapping) or key not in current:
            return MISSING
        current = current[key]
    return current


def _is_null(value: Any) -> bool:
    return value is None or value is MISSING


def _equals(left: Any, right: Any) -> bool:
    # True == 1 in Python; a boolean only ever equals a boolean here
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    if left is MISSING or right is MISSING:
        return left is right
    return left == right


def _comparable(left: Any, right: Any) -> bool:
    if _is_null(left) or _is_null(right):
        return False
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool)
    if isinstance(left, Number) and isinstance(right, Number):
        return True
    if isinstance(left, str) or isinstance(right, str):
        return isinstance(left, str) and isinstance(right, str)
    return type(left) is type(right)


def _match_in(value: Any, candidates: Any) -> bool:
    if not isinstance(candidates, _SEQUENCE_TYPES) or not candidates:
        return False
    return any(_equals(value, candidate) for candidate in candidates)


def _match_nin(value: Any, candidates: Any) -> bool:
    if not isinstance(candidates, _SEQUENCE_TYPES) or not candidates:
        return True
    return not any(_equals(value, candidate) for candidate in candidates)


def _match_like(value: Any, pattern: Any) -> bool:
    if _is_null(value) or pattern is None:
        return False
    return str(pattern).lower() in str(value).lower()


def _match_regex(value: Any, pattern: Any) -> bool:
    if _is_null(value) or pattern is None:
        return False
    return re.search(pattern, str(value)) is not None


def _match_between(value: Any, bounds: Any) -> bool:
    if _is_null(value):
        return False
    if not isinstance(bounds, (list, tuple)) or len(bounds) != 2:
        return False
    low, high = bounds
    if not (_comparable(value, low) and _comparable(value, high)):
        return False
    return low <= value <= high


def _match_operators(value: Any, operators: Mapping[str, Any]) -> bool:
    for op, expected in operators.items():
        if op == "$eq":
            if not _equals(value, expected):
                return False
        elif op == "$ne":
            if _equals(value, expected):
                return False
        elif op in ("$gt", "$gte", "$lt", "$lte"):
            if not _comparable(value, expected):
                return False
            if op == "$gt" and not value > expected:
                return False
            if op == "$gte" and not value >= expected:
                return False
            if op == "$lt" and not value < expected:
                return False
            if op == "$lte" and not value <= expected:
                return False
        elif op == "$in":
            if not _match_in(value, expected):
                return False
        elif op == "$nin":
            if not _match_nin(value, expected):
                return False
        elif op == "$like":
            if not _match_like(value, expected):
                return False
        elif op == "$regex":
            if not _match_regex(value, expected):
                return False
        elif op == "$between":
            if not _match_between(value, expected):
                return False
        elif op == "$exists":
            if bool(expected) != (value is not MISSING):
                return False
        # Unknown operators are ignored
    return True


def _match_condition(value: Any, condition: Any) -> bool:
    if condition is None:
        return _is_null(value)
    if isinstance(condition, Mapping):
        return _match_operators(value, condition)
    if isinstance(condition, _SEQUENCE_TYPES):
        return _match_in(value, condition)
    return _equals(value, condition)


def _match_logical(item: Any, conditions: Any, combine) -> bool:
    if not isinstance(conditions, (list, tuple)) or not conditions:
        return True
    return combine(_match_query(item, condition) for condition in conditions)


def _match_query(item: Any, query: Any) -> bool:
    if not isinstance(query, Mapping) or not query:
        return True

    for key, condition in query.items():
        if key == "$or":
            if not _match_logical(item, condition, any):
                return False
        elif key == "$and":
            if not _match_logical(item, condition, all):
                return False
        elif not _match_condition(get_nested_value(key, item), condition):
            return False
    return True


class QueryExecutor:
    """MongoDB-like filtering for lists of records."""

    @staticmethod
    def execute(items: Iterable[Dict[str, Any]], query: Optional[QueryObject]) -> QueryResult:
        """Filter ``items`` by ``query``.

        An empty query returns every item. A query that cannot be
        evaluated (e.g. an invalid ``$regex``) yields an empty result.
        """
        if items is None or isinstance(items, (str, bytes, Mapping)):
            return QueryResult([], 0)

        records = list(items)
        if not isinstance(query, Mapping) or not query:
            return QueryResult(records, len(records))

        try:
            filtered = [item for item in records if _match_query(item, query)]
        except (TypeError, ValueError, re.error) as e:
            logger.warning(f"Malformed query {query!r}: {e}")
            return QueryResult([], 0)
        return QueryResult(filtered, len(filtered))

    @staticmethod
    def match(item: Optional[Dict[str, Any]], query: Optional[QueryObject]) -> bool:
        """Check if a single record matches ``query``."""
        if item is None:
            return False
        if not isinstance(query, Mapping) or not query:
            return True
        try:
            return _match_query(item, query)
        except (TypeError, ValueError, re.error) as e:
            logger.warning(f"Malformed query {query!r}: {e}")
            return False

    @staticmethod
    def build_query(filters: Optional[Mapping[str, Any]]) -> QueryObject:
        """Build a query object from UI filters, dropping empty values."""
        query: QueryObject = {}
        for field_name, value in (filters or {}).items():
            if value is None or value == "":
                continue
            query[field_name] = value
        return query
