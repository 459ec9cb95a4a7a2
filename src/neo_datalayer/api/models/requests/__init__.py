"""Request models."""

from .list_params import ListParams

__all__ = ["ListParams"]
