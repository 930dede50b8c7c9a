"""
Decoder Logging Module

This module provides structured logging for the record decoder.
"""

from .logger import (
    StructuredLogger,
    get_logger,
    is_configured,
    log_exception,
    setup_logging,
)

__all__ = [
    "StructuredLogger",
    "setup_logging",
    "get_logger",
    "is_configured",
    "log_exception",
]
