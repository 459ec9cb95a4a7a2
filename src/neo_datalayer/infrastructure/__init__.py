"""Data layer infrastructure: signal wiring, background tasks, adapter boundary."""

from .adapters import normalize_list_response, unwrap_record
from .invalidators import SignalInvalidator
from .tasks import BackgroundLoader

__all__ = [
    "normalize_list_response",
    "unwrap_record",
    "SignalInvalidator",
    "BackgroundLoader",
]
