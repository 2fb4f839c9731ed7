"""Utility functions for outlinekit.

This module provides:

- Logging setup and configuration
- Processing statistics and per-glyph progress logging
"""

from outlinekit.utils.logging import (
    ProcessingLogger,
    ProcessingStats,
    configure_logging,
)

__all__ = [
    "ProcessingLogger",
    "ProcessingStats",
    "configure_logging",
]
