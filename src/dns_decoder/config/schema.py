"""
Decoder Configuration Schema

Configuration sections for record decoding limits and logging.
"""

from dataclasses import dataclass, field
from typing import Optional

from .validators import (
    LOG_FORMATS,
    validate_boolean,
    validate_log_file,
    validate_log_level,
    validate_positive_int,
    validate_utf8_errors,
)


@dataclass
class DecoderSettings:
    """Record decoding configuration section."""

    max_pointer_jumps: int = 64
    utf8_errors: str = "replace"
    log_unknown_types: bool = True

    def __post_init__(self) -> None:
        """Validate decoder configuration."""
        if not validate_positive_int(self.max_pointer_jumps):
            raise ValueError(
                f"Max pointer jumps must be positive: {self.max_pointer_jumps}"
            )

        if not validate_utf8_errors(self.utf8_errors):
            raise ValueError(f"Invalid UTF-8 error handler: {self.utf8_errors}")

        if not validate_boolean(self.log_unknown_types):
            raise ValueError(
                f"Log unknown types must be boolean: {self.log_unknown_types}"
            )


@dataclass
class LoggingConfig:
    """Logging configuration section."""

    level: str = "INFO"
    format: str = "structured"
    file: Optional[str] = None
    max_size_mb: int = 10
    backup_count: int = 3

    def __post_init__(self) -> None:
        """Validate logging configuration."""
        if not validate_log_level(self.level):
            raise ValueError(f"Invalid log level: {self.level}")

        if self.format not in LOG_FORMATS:
            raise ValueError(f"Invalid log format: {self.format}")

        if self.file is not None and not validate_log_file(self.file):
            raise ValueError(f"Invalid log file path: {self.file}")

        if not validate_positive_int(self.max_size_mb):
            raise ValueError(f"Max size MB must be positive: {self.max_size_mb}")

        if not validate_positive_int(self.backup_count):
            raise ValueError(f"Backup count must be positive: {self.backup_count}")


@dataclass
class DecoderConfig:
    """Main decoder configuration."""

    decoder: DecoderSettings = field(default_factory=DecoderSettings)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def create_default_config() -> DecoderConfig:
    """Create a default configuration instance."""
    return DecoderConfig()
