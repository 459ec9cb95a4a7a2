"""Local filter pipeline.

ONLY local list queries - answers list parameters against a cached
snapshot: search, then filter, then total, then sort, then paginate.
The order is fixed: ``total`` is the filtered count before pagination.

Following maximum separation architecture - one file = one purpose.
"""

import locale
from numbers import Number
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ...api.models import ListParams
from ...core.exceptions import InvalidQueryError
from ...core.value_objects import SearchFieldSpec
from .query_executor import QueryExecutor, QueryResult

SearchIndex = Mapping[str, Mapping[str, str]]

SORT_ORDERS = ("asc", "desc")


def _text_matches(value: Any, needle: str) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, str):
        return needle in value.lower()
    if isinstance(value, Number):
        return needle in str(value)
    return False


def _sort_key(value: Any) -> Tuple:
    # Values of different kinds never compare directly; group them first
    if isinstance(value, bool):
        return (2, value)
    if isinstance(value, Number):
        return (0, value)
    if isinstance(value, str):
        return (1, locale.strxfrm(value.casefold()), value)
    if isinstance(value, (Mapping, list)):
        return (4, repr(value))
    return (3, type(value).__name__, value)


class LocalFilter:
    """Runs list parameters against an in-memory snapshot."""

    def __init__(self, default_page_size: int = 20, id_field: str = "id"):
        self.default_page_size = default_page_size
        self.id_field = id_field

    def apply(
        self,
        items: List[Dict[str, Any]],
        params: ListParams,
        search_spec: Optional[SearchFieldSpec] = None,
        search_index: Optional[SearchIndex] = None,
    ) -> QueryResult:
        """Answer ``params`` from ``items`` without touching them.

        Without a ``search_spec`` every string/number field is searched.
        With one, own fields are searched on the record and parent fields
        only through ``search_index`` (keyed by ``str(record id)``).
        """
        page, page_size, descending = self._validate(params)

        result = list(items)

        if params.search:
            result = self._search(result, params.search, search_spec, search_index or {})

        query = QueryExecutor.build_query(params.filters)
        if query:
            result = QueryExecutor.execute(result, query).items

        total = len(result)

        if params.sort_by:
            result = self._sort(result, params.sort_by, descending)

        start = (page - 1) * page_size
        return QueryResult(result[start:start + page_size], total)

    def _validate(self, params: ListParams) -> Tuple[int, int, bool]:
        page = params.page if params.page is not None else 1
        page_size = params.page_size if params.page_size is not None else self.default_page_size

        if page < 1:
            raise InvalidQueryError("page", params.page, "must be 1 or greater")
        if page_size < 1:
            raise InvalidQueryError("page_size", params.page_size, "must be 1 or greater")

        sort_order = (params.sort_order or "asc").lower()
        if sort_order not in SORT_ORDERS:
            raise InvalidQueryError("sort_order", params.sort_order, "expected asc or desc")

        return page, page_size, sort_order == "desc"

    def _search(
        self,
        items: List[Dict[str, Any]],
        search: str,
        search_spec: Optional[SearchFieldSpec],
        search_index: SearchIndex,
    ) -> List[Dict[str, Any]]:
        needle = search.lower()

        if search_spec is None:
            return [
                item for item in items
                if any(_text_matches(value, needle) for value in item.values())
            ]

        index_keys = search_spec.index_keys()
        matched = []
        for item in items:
            if any(_text_matches(item.get(name), needle) for name in search_spec.own_fields):
                matched.append(item)
                continue

            resolved = search_index.get(str(item.get(self.id_field)))
            if resolved and any(needle in resolved.get(key, "").lower() for key in index_keys):
                matched.append(item)
        return matched

    def _sort(self, items: List[Dict[str, Any]], sort_by: str, descending: bool) -> List[Dict[str, Any]]:
        """Stable sort with missing/None values last in both directions."""
        present = [item for item in items if item.get(sort_by) is not None]
        missing = [item for item in items if item.get(sort_by) is None]
        present.sort(key=lambda item: _sort_key(item[sort_by]), reverse=descending)
        return present + missing
