"""Signal bus protocol.

ONLY signal contract - the cross-component notice bus the data layer
emits invalidation notices on and subscribes to.
"""

from typing import Any, Callable, Dict, Optional
from typing_extensions import Protocol, runtime_checkable

SignalHandler = Callable[[Dict[str, Any]], Any]
Unsubscribe = Callable[[], None]

DATA_INVALIDATE = "entity:data-invalidate"
DATALAYER_INVALIDATE = "entity:datalayer-invalidate"
AUTH_ACTUATOR = "auth"
WILDCARD = "*"


@runtime_checkable
class SignalBus(Protocol):
    """Signal bus protocol.

    ``emit`` may be sync or async; async emitters are awaited. Handlers
    receive the payload dict and may themselves be coroutines.
    """

    def emit(self, signal: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        ...

    def on(self, signal: str, handler: SignalHandler) -> Unsubscribe:
        """Subscribe and return a callable removing the subscription."""
        ...
