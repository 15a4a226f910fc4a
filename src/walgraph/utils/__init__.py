"""Utility helpers for WalGraph."""

from .id_generation import IDCollisionError, IDGenerator, IDValidationError, IDValidator
from .logging import configure_logging, log_exception

__all__ = [
    "IDGenerator",
    "IDValidator",
    "IDValidationError",
    "IDCollisionError",
    "configure_logging",
    "log_exception",
]
