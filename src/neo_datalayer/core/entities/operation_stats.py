"""Operation statistics domain entity.

ONLY operation counters - monotonically increasing counters for an
entity manager, reset only on explicit request.
"""

from dataclasses import asdict, dataclass
from typing import Dict


@dataclass
class OperationStats:
    """Per-manager operation counters (for debug panels)."""

    list: int = 0
    get: int = 0
    create: int = 0
    update: int = 0
    delete: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    detail_cache_hits: int = 0
    detail_cache_misses: int = 0
    max_items_seen: int = 0
    max_total: int = 0

    def observe(self, item_count: int, total: int) -> None:
        """Track the largest page and total seen so far."""
        if item_count > self.max_items_seen:
            self.max_items_seen = item_count
        if total > self.max_total:
            self.max_total = total

    @property
    def hit_rate_percent(self) -> float:
        total_requests = self.cache_hits + self.cache_misses
        if total_requests == 0:
            return 0.0
        return self.cache_hits / total_requests * 100

    def copy(self) -> "OperationStats":
        return OperationStats(**asdict(self))

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)
