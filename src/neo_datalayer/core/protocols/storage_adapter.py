"""Storage adapter protocol.

ONLY storage contract - defines the interface the data layer consumes
from REST/SDK/in-memory storage adapters, and the static capability
flags those adapters declare.

Following maximum separation architecture - one file = one purpose.
"""

from typing import Any, Callable, Dict, List, Optional, Union
from dataclasses import dataclass
from typing_extensions import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

EntityId = Union[str, int]
Record = Dict[str, Any]


class StorageCapabilities(BaseModel):
    """Capability flags declared by a storage adapter.

    ``supports_caching`` left as ``None`` means "not declared" and does not
    disable caching; only an explicit ``False`` does. ``cache_ttl_ms`` uses
    the TTL sentinels (``-1`` never expires, ``0`` disables caching) and
    may be updated at runtime, e.g. from response headers.
    """

    model_config = ConfigDict(validate_assignment=True)

    supports_total: bool = False
    supports_filters: bool = False
    supports_pagination: bool = False
    supports_caching: Optional[bool] = None
    requires_auth: bool = False
    search_fields: Optional[List[str]] = None
    cache_ttl_ms: Optional[int] = Field(default=None, ge=-1)
    asymmetric: bool = False


@runtime_checkable
class StorageAdapter(Protocol):
    """Storage adapter protocol.

    ``list`` must report ``total`` as the count matching the query, not the
    size of the returned page: the opportunistic cache fill trusts it to
    decide whether a response is the complete data set.

    Optional members, looked up by the entity manager when needed:
    ``get_many(ids)``, ``patch(id, data)``, ``request(method, path, **options)``
    and ``reset()``.
    """

    capabilities: StorageCapabilities

    async def list(self, params: Dict[str, Any], context: Optional[Dict[str, Any]] = None) -> Any:
        """Return ``{items, total}`` (or an equivalent payload) for the query."""
        ...

    async def get(self, entity_id: EntityId, context: Optional[Dict[str, Any]] = None) -> Optional[Record]:
        """Return the record, ``None`` or raise when it does not exist."""
        ...

    async def create(self, data: Record) -> Record:
        ...

    async def update(self, entity_id: EntityId, data: Record) -> Record:
        ...

    async def delete(self, entity_id: EntityId) -> None:
        ...


EndpointBuilder = Callable[[Optional[Dict[str, Any]]], str]


@dataclass
class StorageResolution:
    """Where an operation is routed.

    ``endpoint`` may be a fixed path or a builder called with the routing
    context; a builder makes the resolution dynamic (context-dependent
    data). ``params`` are defaults merged under the caller's parameters.
    """

    storage: Optional[Any] = None
    endpoint: Optional[Union[str, EndpointBuilder]] = None
    params: Optional[Dict[str, Any]] = None


@dataclass
class ResolvedStorage:
    """Normalized storage resolution used by the entity manager."""

    storage: Optional[Any]
    endpoint: Optional[str] = None
    params: Optional[Dict[str, Any]] = None
    is_dynamic: bool = False
