"""Operation not supported exception."""

from .base import DataLayerError


class OperationNotSupportedError(DataLayerError):
    """Resolved storage is missing, or lacks the requested primitive."""

    def __init__(self, entity: str, operation: str, reason: str = "not implemented"):
        self.entity = entity
        self.operation = operation
        super().__init__(
            f"[EntityManager:{entity}] {operation}() {reason}",
            error_code="OPERATION_NOT_SUPPORTED",
            details={"entity": entity, "operation": operation},
        )
