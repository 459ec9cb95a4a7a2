"""Deferred task registry protocol."""

from typing import Any, Awaitable, Callable
from typing_extensions import Protocol, runtime_checkable

AUTH_READY = "auth:ready"


@runtime_checkable
class DeferredRegistry(Protocol):
    """Named deferred tasks used for startup sequencing.

    ``queue`` runs the factory once per name (later calls return the
    same pending result); ``wait`` can be called before ``queue``.
    """

    def has(self, name: str) -> bool:
        ...

    def queue(self, name: str, factory: Callable[[], Awaitable[Any]]) -> Awaitable[Any]:
        ...

    def wait(self, name: str) -> Awaitable[Any]:
        ...
