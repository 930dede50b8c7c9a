"""
Structured Logging Framework

This module provides the logging infrastructure using structlog on top of the
standard library: a console handler in the configured format and an optional
rotating JSON file. Only the ``dns_decoder`` logger hierarchy is touched, the
root logger of the host application is left alone.
"""

import logging
import logging.handlers
import sys
import traceback
from pathlib import Path
from typing import List, Optional

import structlog

from ..config.schema import LoggingConfig

ROOT_LOGGER_NAME = "dns_decoder"

SHARED_PROCESSORS = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
]


class StructuredLogger:
    """Structured logger using structlog with console and JSON file output."""

    def __init__(self, config: LoggingConfig):
        """Initialize structured logger.

        Args:
            config: Logging configuration
        """
        self.config = config
        self._configured = False
        self.logger = None

    def _get_console_renderer(self):
        if self.config.format == "simple":
            return structlog.processors.KeyValueRenderer(
                key_order=["event"], drop_missing=True
            )
        if self.config.format == "detailed":
            return structlog.processors.KeyValueRenderer(
                key_order=["timestamp", "level", "logger", "event"],
                drop_missing=True,
            )
        return structlog.dev.ConsoleRenderer(colors=False)

    def _get_processors(self) -> List:
        return SHARED_PROCESSORS + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter]

    def configure(self) -> None:
        """Configure structlog and the package logger handlers."""
        if self._configured:
            return

        log_level = getattr(logging, self.config.level.upper())

        package_logger = logging.getLogger(ROOT_LOGGER_NAME)
        package_logger.handlers.clear()
        package_logger.setLevel(log_level)
        package_logger.propagate = False

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    self._get_console_renderer(),
                ],
                foreign_pre_chain=SHARED_PROCESSORS,
            )
        )
        package_logger.addHandler(console_handler)

        if self.config.file:
            self._setup_file_logging(package_logger, log_level)

        structlog.configure(
            processors=self._get_processors(),
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

        self._configured = True
        self.logger = structlog.get_logger(ROOT_LOGGER_NAME)

    def _setup_file_logging(self, package_logger: logging.Logger, log_level: int) -> None:
        """Setup file logging with JSON format."""
        log_path = Path(self.config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=self.config.file,
            maxBytes=self.config.max_size_mb * 1024 * 1024,
            backupCount=self.config.backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    structlog.processors.JSONRenderer(),
                ],
                foreign_pre_chain=SHARED_PROCESSORS,
            )
        )
        package_logger.addHandler(file_handler)

    def get_logger(self, name: str = ROOT_LOGGER_NAME) -> structlog.stdlib.BoundLogger:
        """Get a structured logger instance.

        Args:
            name: Logger name

        Returns:
            Structured logger instance
        """
        if not self._configured:
            self.configure()

        return structlog.get_logger(name)


# Global logger instance
_logger_instance: Optional[StructuredLogger] = None


def setup_logging(config: LoggingConfig) -> None:
    """Setup global logging configuration.

    Args:
        config: Logging configuration
    """
    global _logger_instance
    _logger_instance = StructuredLogger(config)
    _logger_instance.configure()


def is_configured() -> bool:
    return _logger_instance is not None


def get_logger(name: str = ROOT_LOGGER_NAME) -> structlog.stdlib.BoundLogger:
    """Get a logger instance.

    Before ``setup_logging`` is called, events are handed to the standard
    library logger of the same name, so the host application's logging
    configuration decides what is emitted.

    Args:
        name: Logger name

    Returns:
        Structured logger instance
    """
    if _logger_instance is None:
        return structlog.wrap_logger(
            logging.getLogger(name),
            processors=[structlog.stdlib.render_to_log_kwargs],
            wrapper_class=structlog.stdlib.BoundLogger,
        )

    return _logger_instance.get_logger(name)


def log_exception(
    logger: structlog.stdlib.BoundLogger, message: str, exc: Optional[Exception] = None
) -> None:
    """Log an exception with detailed traceback information.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception instance (optional, will use current exception if None)
    """
    if exc is None:
        exc = sys.exc_info()[1]

    if exc is None:
        logger.error(message)
        return

    tb_str = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    logger.error(
        message,
        exception_type=type(exc).__name__,
        exception_message=str(exc),
        traceback=tb_str,
    )
