"""Cache invalidators."""

from .signal_invalidator import SignalInvalidator

__all__ = ["SignalInvalidator"]
