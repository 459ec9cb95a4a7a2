"""List result response model."""

from typing import Any, Dict, List
from pydantic import BaseModel, Field


class ListResult(BaseModel):
    """Normalized list response.

    ``total`` counts every record matching the query, not only the
    returned page.
    """

    items: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="Records for the requested page"
    )

    total: int = Field(
        default=0,
        ge=0,
        description="Count of all records matching the query"
    )

    from_cache: bool = Field(
        default=False,
        description="Answered from the local list cache"
    )
