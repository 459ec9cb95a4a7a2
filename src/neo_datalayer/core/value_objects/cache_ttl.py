"""Cache TTL value object.

ONLY TTL handling - time-to-live value object in milliseconds with
never-expire and disabled sentinels.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CacheTTL:
    """Cache TTL (Time To Live) value object.

    Millisecond time-to-live with two special values:
    - ``NEVER_EXPIRE`` (-1): entries stay valid until invalidated
    - ``DISABLED`` (0): caching is switched off entirely

    A disabled TTL is not the same thing as "no TTL": the former turns the
    cache off, the latter keeps it forever.
    """

    milliseconds: int

    # Special TTL values
    NEVER_EXPIRE = -1
    DISABLED = 0

    # Common TTL durations (in milliseconds)
    ONE_SECOND = 1000
    ONE_MINUTE = 60_000
    FIVE_MINUTES = 300_000
    ONE_HOUR = 3_600_000

    def __post_init__(self):
        """Validate TTL value."""
        if self.milliseconds < self.NEVER_EXPIRE:
            raise ValueError(f"TTL cannot be less than {self.NEVER_EXPIRE}")

    @classmethod
    def never_expire(cls) -> "CacheTTL":
        """Create TTL that never expires."""
        return cls(cls.NEVER_EXPIRE)

    @classmethod
    def disabled(cls) -> "CacheTTL":
        """Create TTL that disables caching."""
        return cls(cls.DISABLED)

    @classmethod
    def seconds(cls, seconds: float) -> "CacheTTL":
        """Create TTL from seconds."""
        if seconds <= 0:
            raise ValueError("Seconds must be positive")
        return cls(int(seconds * 1000))

    @classmethod
    def resolve(cls, *candidates: Optional[int]) -> "CacheTTL":
        """Pick the first candidate that is set, in precedence order.

        Falls back to never-expire when every candidate is ``None``.
        """
        for candidate in candidates:
            if candidate is not None:
                return cls(candidate)
        return cls.never_expire()

    def is_never_expire(self) -> bool:
        """Check if TTL never expires."""
        return self.milliseconds < 0

    def is_disabled(self) -> bool:
        """Check if TTL disables caching."""
        return self.milliseconds == self.DISABLED

    def has_elapsed(self, loaded_at: Optional[float], now: float) -> bool:
        """Check whether a positive TTL has run out since ``loaded_at``.

        Sentinel TTLs never elapse, and neither does a zero or negative
        elapsed time (clock skew or a load stamped in the future).
        """
        if loaded_at is None or self.milliseconds <= 0:
            return False
        elapsed = now - loaded_at
        if elapsed <= 0:
            return False
        return elapsed > self.milliseconds

    def is_entry_expired(self, loaded_at: float, now: float) -> bool:
        """Check expiry of a single cached entry.

        Unlike ``has_elapsed``, a disabled TTL makes every entry expired.
        """
        if self.is_never_expire():
            return False
        if self.is_disabled():
            return True
        return self.has_elapsed(loaded_at, now)

    def expires_at(self, loaded_at: Optional[float]) -> Optional[float]:
        """Get absolute expiry time, None if it never expires."""
        if loaded_at is None or self.milliseconds <= 0:
            return None
        return loaded_at + self.milliseconds

    def __str__(self) -> str:
        """Human-readable string representation."""
        if self.is_never_expire():
            return "never expires"

        if self.is_disabled():
            return "disabled"

        if self.milliseconds < 1000:
            return f"{self.milliseconds}ms"
        elif self.milliseconds < 60_000:
            return f"{self.milliseconds // 1000}s"
        elif self.milliseconds < 3_600_000:
            return f"{self.milliseconds // 60_000}m"
        else:
            return f"{self.milliseconds // 3_600_000}h"
