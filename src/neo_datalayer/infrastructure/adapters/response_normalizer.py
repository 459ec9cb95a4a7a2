"""Storage response normalizer.

ONLY response shape reconciliation - turns the payload shapes storage
adapters return into a ListResult at the boundary.

Accepted shapes:
- ``{"items": [...], "total": n}``
- ``{"data": [...], "total": n}`` or ``{"data": [...], "pagination": {"total": n}}``
- ``{"data": {"items": [...], ...}}`` (envelope around any of the above)
- a plain list of records
- a ``ListResult`` or any object with ``items``/``total`` attributes

Following maximum separation architecture - one file = one purpose.
"""

from typing import Any, List, Mapping, Optional

from ...api.models import ListResult
from ...core.exceptions import StorageResponseError


def _total_from(payload: Mapping[str, Any], items: List[Any]) -> int:
    total = payload.get("total")
    if total is None:
        pagination = payload.get("pagination")
        if isinstance(pagination, Mapping):
            total = pagination.get("total")
    if total is None:
        return len(items)
    return int(total)


def unwrap_record(payload: Any) -> Any:
    """Unwrap a ``{"data": record}`` envelope from a request() response."""
    if isinstance(payload, Mapping) and "data" in payload and payload["data"] is not None:
        return payload["data"]
    return payload


def normalize_list_response(payload: Any, entity: Optional[str] = None) -> ListResult:
    """Normalize a storage list payload into ``ListResult``.

    Raises:
        StorageResponseError: If the payload has none of the accepted shapes
    """
    if isinstance(payload, ListResult):
        return payload

    if isinstance(payload, (list, tuple)):
        items = list(payload)
        return ListResult(items=items, total=len(items))

    if isinstance(payload, Mapping):
        items = payload.get("items")
        if items is None:
            data = payload.get("data")
            if isinstance(data, Mapping):
                return normalize_list_response(data, entity)
            items = data
        if items is None:
            items = []
        if not isinstance(items, (list, tuple)):
            raise StorageResponseError(type(items).__name__, entity)
        items = list(items)
        return ListResult(items=items, total=_total_from(payload, items))

    if hasattr(payload, "items") and hasattr(payload, "total"):
        items = list(payload.items or [])
        total = payload.total if payload.total is not None else len(items)
        return ListResult(items=items, total=total)

    raise StorageResponseError(type(payload).__name__, entity)
