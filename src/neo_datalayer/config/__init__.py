"""Data layer configuration."""

from .settings import DataLayerSettings, get_settings
from .logging_config import LoggingConfig, get_logger, setup_logging

__all__ = [
    "DataLayerSettings",
    "get_settings",
    "LoggingConfig",
    "get_logger",
    "setup_logging",
]
