"""Detail cache entry domain entity."""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class DetailCacheEntry:
    """Single record cached by identifier.

    ``loaded_at`` is set on insert and on overwrite; eviction removes
    the oldest ``loaded_at`` first. Reads do not touch it.
    """

    item: Dict[str, Any]
    loaded_at: float
