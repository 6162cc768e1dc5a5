"""
Utilities package for tablegen.

Exports shared helpers for logging and phase timing.
Keep this package lightweight and free of domain-specific logic.
"""

from tablegen.utils.logging import configure_logging, get_logger
from tablegen.utils.profiler import ProfileStats, profile_block

__all__ = [
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
]
