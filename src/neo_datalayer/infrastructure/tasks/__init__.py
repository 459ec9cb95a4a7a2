"""Background task supervision."""

from .background_loader import BackgroundLoader

__all__ = ["BackgroundLoader"]
