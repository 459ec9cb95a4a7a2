"""Invalid query exception."""

from typing import Any, Optional

from .base import DataLayerError


class InvalidQueryError(DataLayerError):
    """Structurally invalid list/query parameters.

    Raised for parameters that can never be evaluated (page below 1,
    non-positive page size, unknown sort order). Malformed filter
    operators are not reported here; the query executor treats those
    as a non-match.
    """

    def __init__(self, parameter: str, value: Any, reason: Optional[str] = None):
        self.parameter = parameter
        self.value = value
        message = f"Invalid value for '{parameter}': {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(
            message,
            error_code="INVALID_QUERY",
            details={"parameter": parameter, "value": repr(value)},
        )
