"""Base exceptions for neo-datalayer.

This module defines the base exception hierarchy for the entity data layer.
All exceptions inherit from DataLayerError and include error codes and details
so callers can render structured error responses.
"""

from typing import Any, Dict, Optional


class DataLayerError(Exception):
    """Base exception for all neo-datalayer errors.

    All exceptions raised by the data layer inherit from this base class
    and include structured error information for better debugging.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
                "type": self.__class__.__name__,
            }
        }
