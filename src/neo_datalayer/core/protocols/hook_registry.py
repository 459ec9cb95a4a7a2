"""Lifecycle hook registry protocol."""

from typing import Any, Dict
from typing_extensions import Protocol, runtime_checkable

PRESAVE = "entity:presave"
POSTSAVE = "entity:postsave"
PREDELETE = "entity:predelete"


@runtime_checkable
class HookRegistry(Protocol):
    """Invokes registered lifecycle hooks.

    A hook raising aborts the surrounding operation; a presave hook may
    replace ``context["record"]`` to change what gets saved.
    """

    async def invoke(self, name: str, context: Dict[str, Any]) -> None:
        ...
