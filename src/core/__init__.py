"""
Core module for cross-cutting concerns.

This module provides:
- Structured logging configuration
- Common utilities
"""

from core.logging import (
    LoggerMixin,
    configure_from_settings,
    configure_logging,
    get_logger,
    log_context,
)
from core.utils import clamp, normalize_string_list, top_by_frequency

__all__ = [
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "log_context",
    "LoggerMixin",
    "clamp",
    "normalize_string_list",
    "top_by_frequency",
]
