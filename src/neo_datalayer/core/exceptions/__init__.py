"""Data layer exceptions.

One exception per file following maximum separation architecture.
"""

from .base import DataLayerError
from .entity_not_found import EntityNotFoundError
from .operation_not_supported import OperationNotSupportedError
from .storage_response_error import StorageResponseError
from .invalid_query import InvalidQueryError

__all__ = [
    "DataLayerError",
    "EntityNotFoundError",
    "OperationNotSupportedError",
    "StorageResponseError",
    "InvalidQueryError",
]
