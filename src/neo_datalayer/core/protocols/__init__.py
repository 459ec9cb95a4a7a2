"""Data layer protocols for the external collaborators."""

from .storage_adapter import (
    EntityId,
    Record,
    ResolvedStorage,
    StorageAdapter,
    StorageCapabilities,
    StorageResolution,
)
from .signal_bus import (
    AUTH_ACTUATOR,
    DATA_INVALIDATE,
    DATALAYER_INVALIDATE,
    WILDCARD,
    SignalBus,
)
from .deferred_registry import AUTH_READY, DeferredRegistry
from .hook_registry import POSTSAVE, PREDELETE, PRESAVE, HookRegistry
from .orchestrator import Orchestrator

__all__ = [
    "EntityId",
    "Record",
    "ResolvedStorage",
    "StorageAdapter",
    "StorageCapabilities",
    "StorageResolution",
    "SignalBus",
    "DATA_INVALIDATE",
    "DATALAYER_INVALIDATE",
    "AUTH_ACTUATOR",
    "WILDCARD",
    "DeferredRegistry",
    "AUTH_READY",
    "HookRegistry",
    "PRESAVE",
    "POSTSAVE",
    "PREDELETE",
    "Orchestrator",
]
