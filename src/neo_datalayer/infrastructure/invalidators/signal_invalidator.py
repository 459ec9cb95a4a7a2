"""Signal-driven cache invalidator.

ONLY signal subscriptions - wires an entity manager's caches to the
invalidation notices published on the signal bus:

- ``entity:data-invalidate`` for a declared parent entity clears the
  search index and invalidates the list cache
- ``entity:data-invalidate`` for the entity itself clears the detail cache
  (asymmetric entities only)
- ``entity:datalayer-invalidate`` for the entity, for ``"*"`` or without an
  entity invalidates the whole data layer; auth-triggered broadcasts are
  ignored unless the entity is auth-sensitive

Following maximum separation architecture - one file = one purpose.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from ...core.protocols import (
    AUTH_ACTUATOR,
    DATA_INVALIDATE,
    DATALAYER_INVALIDATE,
    WILDCARD,
    SignalBus,
)

logger = logging.getLogger(__name__)


def _event_data(payload: Any) -> Mapping[str, Any]:
    # Buses that wrap payloads as {"name": ..., "data": {...}} are accepted too
    if not isinstance(payload, Mapping):
        return {}
    data = payload.get("data")
    if "entity" not in payload and isinstance(data, Mapping):
        return data
    return payload


class SignalInvalidator:
    """Signal subscriptions of one entity manager.

    ``attach`` is idempotent: subscriptions from a previous call are
    removed before new ones are registered.
    """

    def __init__(self, manager):
        """Initialize for an entity manager.

        Args:
            manager: Entity manager whose caches the signals invalidate
        """
        self._manager = manager
        self._unsubscribers: List[Callable[[], None]] = []

    def attach(self, signals: Optional[SignalBus]) -> None:
        """Subscribe the manager to ``signals``."""
        self.detach()
        if signals is None:
            return

        manager = self._manager
        parent_entities = [parent.entity for parent in manager.parents.values()]

        if parent_entities:
            self._subscribe(
                signals,
                DATA_INVALIDATE,
                lambda data: self._on_parent_data_invalidate(data, parent_entities),
            )

        if manager.is_detail_cache_enabled:
            self._subscribe(signals, DATA_INVALIDATE, self._on_own_data_invalidate)

        self._subscribe(signals, DATALAYER_INVALIDATE, self._on_datalayer_invalidate)

    def detach(self) -> None:
        """Remove every subscription."""
        unsubscribers, self._unsubscribers = self._unsubscribers, []
        for unsubscribe in unsubscribers:
            unsubscribe()

    def _subscribe(self, signals: SignalBus, signal: str, handler: Callable[[Mapping[str, Any]], None]) -> None:
        entity = self._manager.name

        def _guarded(payload: Optional[Dict[str, Any]] = None) -> None:
            try:
                handler(_event_data(payload))
            except Exception as e:
                logger.error(
                    f"[EntityManager:{entity}] Listener for '{signal}' failed: {e}",
                    exc_info=True,
                )

        self._unsubscribers.append(signals.on(signal, _guarded))

    def _on_parent_data_invalidate(self, data: Mapping[str, Any], parent_entities: List[str]) -> None:
        if data.get("entity") in parent_entities:
            self._manager.clear_search_index()

    def _on_own_data_invalidate(self, data: Mapping[str, Any]) -> None:
        if data.get("entity") == self._manager.name:
            self._manager.invalidate_detail_cache()

    def _on_datalayer_invalidate(self, data: Mapping[str, Any]) -> None:
        if data.get("actuator") == AUTH_ACTUATOR and not self._manager.auth_sensitive:
            return

        entity = data.get("entity")
        if not entity or entity == WILDCARD or entity == self._manager.name:
            self._manager.invalidate_data_layer()
