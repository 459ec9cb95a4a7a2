"""Orchestrator protocol."""

from typing import Any, Optional
from typing_extensions import Protocol, runtime_checkable

from .deferred_registry import DeferredRegistry


@runtime_checkable
class Orchestrator(Protocol):
    """Registry of entity managers.

    Used to reach parent managers by name (search-field resolution) and
    the deferred registry (warmup).
    """

    deferred: Optional[DeferredRegistry]

    def get(self, name: str) -> Optional[Any]:
        ...
