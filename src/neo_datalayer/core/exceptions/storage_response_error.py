"""Storage response exception.

ONLY payload shape errors - raised when a storage adapter returns a list
payload that cannot be reconciled into items and a total.
"""

from typing import Optional

from .base import DataLayerError


class StorageResponseError(DataLayerError):
    """List payload could not be normalized."""

    def __init__(self, payload_type: str, entity: Optional[str] = None):
        self.payload_type = payload_type
        self.entity = entity
        prefix = f"[EntityManager:{entity}] " if entity else ""
        super().__init__(
            f"{prefix}Cannot normalize list response of type {payload_type}",
            error_code="STORAGE_RESPONSE_INVALID",
            details={"entity": entity, "payload_type": payload_type},
        )
