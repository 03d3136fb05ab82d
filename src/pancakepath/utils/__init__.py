"""Utility functions for pancakepath.

This module provides utility functions including:

- Logging setup and configuration
- Processing statistics tracking
"""

from pancakepath.utils.logging import (
    ProcessingLogger,
    ProcessingStats,
    configure_logging,
)

__all__ = [
    "ProcessingLogger",
    "ProcessingStats",
    "configure_logging",
]
