"""Core infrastructure: exceptions, logging and settings."""

from .exceptions import AssurVieError, ValidationError
from .logging import configure_logging, get_logger
from .settings import AppSettings, get_settings

__all__ = [
    "AssurVieError",
    "ValidationError",
    "configure_logging",
    "get_logger",
    "AppSettings",
    "get_settings",
]
