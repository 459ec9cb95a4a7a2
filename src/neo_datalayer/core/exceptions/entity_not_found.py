"""Entity not found exception.

ONLY point-fetch misses - raised when a storage adapter has no record
for the requested identifier.
"""

from typing import Union

from .base import DataLayerError


class EntityNotFoundError(DataLayerError):
    """Record lookup by identifier returned nothing.

    Never cached: the next lookup for the same identifier goes back to
    the storage adapter.
    """

    def __init__(self, entity: str, entity_id: Union[str, int]):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            f"[EntityManager:{entity}] Entity not found: {entity_id}",
            error_code="ENTITY_NOT_FOUND",
            details={"entity": entity, "id": entity_id},
        )
