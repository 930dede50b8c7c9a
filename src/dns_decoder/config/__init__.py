"""
Decoder Configuration Module
"""

from .loader import ConfigLoader, load_config, resolve_config
from .schema import DecoderConfig, DecoderSettings, LoggingConfig, create_default_config

__all__ = [
    "ConfigLoader",
    "load_config",
    "resolve_config",
    "DecoderConfig",
    "DecoderSettings",
    "LoggingConfig",
    "create_default_config",
]
