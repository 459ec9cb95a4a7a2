"""List parameters request model.

ONLY list/query parameters - search, filters, sort and pagination sent to
an entity manager's list() and query().

Following maximum separation architecture - one file = one purpose.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


# Flags consumed by the entity manager, never forwarded to storage
MANAGER_ONLY_FIELDS = {"cache_safe", "search_fields"}


class ListParams(BaseModel):
    """Parameters for listing entities.

    Extra keys are accepted and forwarded to the storage adapter untouched,
    which lets adapters take their own query options.

    ``cache_safe`` is a caller contract: it certifies that ``filters`` are
    constant for the session (e.g. ownership scoping), so a filtered
    request may still be answered from, and fill, the list cache. Nothing
    checks that claim.
    """

    model_config = ConfigDict(extra="allow")

    page: Optional[int] = Field(
        default=None,
        description="1-based page number"
    )

    page_size: Optional[int] = Field(
        default=None,
        description="Items per page"
    )

    search: Optional[str] = Field(
        default=None,
        description="Case-insensitive substring search"
    )

    filters: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Field conditions (literal, list for one-of, or operator object)"
    )

    sort_by: Optional[str] = Field(
        default=None,
        description="Field to sort by"
    )

    sort_order: Optional[str] = Field(
        default=None,
        description="Sort direction: asc or desc"
    )

    cache_safe: bool = Field(
        default=False,
        description="Filters are session-constant and may use the list cache"
    )

    search_fields: Optional[List[str]] = Field(
        default=None,
        description="Override of the storage's declared search fields"
    )

    @property
    def has_query_terms(self) -> bool:
        """Check if the request narrows the result set (search or filters)."""
        return bool(self.search) or bool(self.filters)

    def to_storage_params(self) -> Dict[str, Any]:
        """Build the parameter dict sent to a storage adapter."""
        return self.model_dump(exclude=MANAGER_ONLY_FIELDS, exclude_none=True)
