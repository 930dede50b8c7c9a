"""
Configuration Validators

Checks used by the configuration sections in ``schema``.
"""

import logging
import os
from typing import Any

# Handlers that always yield a str for TXT payloads
UTF8_ERROR_HANDLERS = ("strict", "replace", "ignore", "backslashreplace")

LOG_FORMATS = ("simple", "detailed", "structured")


def validate_boolean(value: Any) -> bool:
    return isinstance(value, bool)


def validate_positive_int(value: Any) -> bool:
    """Validate a strictly positive int, rejecting bools."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_log_level(level: Any) -> bool:
    """Validate a level name known to the logging module."""
    if not isinstance(level, str):
        return False
    return isinstance(logging.getLevelName(level.upper()), int)


def validate_log_file(path: Any) -> bool:
    """Validate a log file path: non-empty and not an existing directory."""
    if not isinstance(path, str) or not path.strip():
        return False
    return not os.path.isdir(path)


def validate_utf8_errors(value: Any) -> bool:
    return value in UTF8_ERROR_HANDLERS
