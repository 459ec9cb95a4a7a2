"""Cache state domain entity.

ONLY list snapshot state - the in-memory copy of an entity's full
result set and the bookkeeping that says whether it can be trusted.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class CacheState:
    """Snapshot of an entity's list data.

    When ``valid`` is true, ``items`` is the complete result set for the
    entity; a partial page is never marked valid. ``total`` is the count
    the storage reported for the last unfiltered load and may exceed
    ``len(items)`` (overflow).
    """

    items: List[Dict[str, Any]] = field(default_factory=list)
    total: int = 0
    loaded_at: Optional[float] = None
    valid: bool = False

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def overflow(self) -> bool:
        """Valid, but holds fewer items than the reported total."""
        return self.valid and self.total > len(self.items)

    def fill(self, items: List[Dict[str, Any]], total: int, loaded_at: float) -> None:
        """Store a complete result set and mark it valid."""
        self.items = items
        self.total = total
        self.loaded_at = loaded_at
        self.valid = True

    def reset(self) -> None:
        """Drop the snapshot and mark it invalid."""
        self.items = []
        self.total = 0
        self.loaded_at = None
        self.valid = False
