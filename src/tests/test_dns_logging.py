"""
Tests for Decoder Logging

This module tests the structured logging setup and the events emitted by the
record decoder.
"""

import json
import logging
import struct

import pytest
import structlog

from dns_decoder.config.schema import LoggingConfig
from dns_decoder.core.exceptions import RecordDesyncError
from dns_decoder.core.factory import RecordFactory
from dns_decoder.core.reader import DatagramReader
from dns_decoder.dns_logging import get_logger, is_configured, log_exception, setup_logging
from dns_decoder.dns_logging import logger as logger_module
from dns_decoder.dns_logging.logger import ROOT_LOGGER_NAME, StructuredLogger


def unknown_type_record() -> bytes:
    return b"\x00" + struct.pack("!HHIH", 9999, 1, 60, 2) + b"\xaa\xbb"


def flush_package_handlers():
    for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
        handler.flush()


@pytest.fixture(autouse=True)
def reset_logging():
    """Restore unconfigured logging around every test."""
    yield
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in package_logger.handlers:
        handler.close()
    package_logger.handlers.clear()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)
    logger_module._logger_instance = None
    structlog.reset_defaults()


class TestStructuredLogger:
    """Test structured logging framework."""

    def test_structured_logger_creation(self):
        """Test creating a structured logger."""
        config = LoggingConfig(level="INFO", format="structured")

        logger = StructuredLogger(config)
        assert logger.config == config
        assert not logger._configured

    def test_structured_logger_configuration(self, tmp_path):
        """Test logger configuration with a file."""
        config = LoggingConfig(level="DEBUG", file=str(tmp_path / "logs" / "test.log"))

        logger = StructuredLogger(config)
        logger.configure()

        assert logger._configured
        assert logger.logger is not None
        assert (tmp_path / "logs").is_dir()
        package_logger = logging.getLogger(ROOT_LOGGER_NAME)
        assert package_logger.level == logging.DEBUG
        assert package_logger.propagate is False
        assert len(package_logger.handlers) == 2

    def test_processors_end_with_formatter_wrapper(self):
        """Test that rendering is left to the handler formatters."""
        logger = StructuredLogger(LoggingConfig())

        processors = logger._get_processors()

        assert processors[-1] is structlog.stdlib.ProcessorFormatter.wrap_for_formatter

    @pytest.mark.parametrize(
        "log_format,renderer",
        [
            ("structured", structlog.dev.ConsoleRenderer),
            ("simple", structlog.processors.KeyValueRenderer),
            ("detailed", structlog.processors.KeyValueRenderer),
        ],
    )
    def test_console_renderer_per_format(self, log_format, renderer):
        """Test console renderer selection."""
        logger = StructuredLogger(LoggingConfig(format=log_format))

        assert isinstance(logger._get_console_renderer(), renderer)


class TestDecoderEvents:
    """Test events emitted while decoding."""

    def test_unknown_type_written_as_json(self, tmp_path):
        """Test that skipped records are logged to the JSON file."""
        log_file = tmp_path / "decoder.log"
        setup_logging(LoggingConfig(level="DEBUG", file=str(log_file)))
        assert is_configured()

        RecordFactory(DatagramReader(unknown_type_record())).read_record()
        flush_package_handlers()

        entries = [json.loads(line) for line in log_file.read_text().splitlines()]
        (entry,) = [e for e in entries if e["event"] == "Skipping record of unknown type"]
        assert entry["record_type"] == "TYPE9999"
        assert entry["raw_data_length"] == 2
        assert entry["level"] == "debug"
        assert entry["logger"] == "dns_decoder.core.factory"

    def test_desync_logged_before_raising(self, tmp_path):
        """Test that a desync leaves an error entry."""
        log_file = tmp_path / "decoder.log"
        setup_logging(LoggingConfig(level="INFO", file=str(log_file)))
        data = b"\x00" + struct.pack("!HHIH", 1, 1, 60, 5) + b"\x01\x02\x03\x04\x05"

        with pytest.raises(RecordDesyncError):
            RecordFactory(DatagramReader(data)).read_record()
        flush_package_handlers()

        entries = [json.loads(line) for line in log_file.read_text().splitlines()]
        (entry,) = [e for e in entries if e["event"] == "Record reader index out of sync"]
        assert entry["level"] == "error"
        assert entry["record_type"] == "A"
        assert entry["expected_index"] == entry["actual_index"] + 1

    def test_unconfigured_uses_standard_logging(self, caplog):
        """Test that events reach stdlib logging before setup_logging."""
        caplog.set_level(logging.DEBUG, logger=ROOT_LOGGER_NAME)

        RecordFactory(DatagramReader(unknown_type_record())).read_record()

        records = [r for r in caplog.records if r.name == "dns_decoder.core.factory"]
        assert records[0].getMessage() == "Skipping record of unknown type"
        assert records[0].record_type == "TYPE9999"

    def test_unconfigured_desync_raises_desync_error(self, caplog):
        """Test that a desync surfaces as RecordDesyncError before setup_logging."""
        assert not is_configured()
        data = b"\x00" + struct.pack("!HHIH", 1, 1, 300, 5) + bytes([192, 0, 2, 1, 0])

        with pytest.raises(RecordDesyncError) as exc_info:
            RecordFactory(DatagramReader(data)).read_record()

        assert exc_info.value.expected_index == len(data)
        (record,) = [
            r for r in caplog.records if r.name == "dns_decoder.core.factory"
        ]
        assert record.levelno == logging.ERROR
        assert record.getMessage() == "Record reader index out of sync"
        assert record.owner == "."
        assert record.record_type == "A"


class TestLogException:
    """Test exception logging helper."""

    def test_log_exception_fields(self, tmp_path):
        """Test exception type, message and traceback fields."""
        log_file = tmp_path / "decoder.log"
        setup_logging(LoggingConfig(file=str(log_file)))
        logger = get_logger("dns_decoder.tests")

        try:
            raise RecordDesyncError("A", 10, 11)
        except RecordDesyncError as e:
            log_exception(logger, "Decoding failed", e)
        flush_package_handlers()

        (entry,) = [json.loads(line) for line in log_file.read_text().splitlines()]
        assert entry["event"] == "Decoding failed"
        assert entry["exception_type"] == "RecordDesyncError"
        assert "expected 10, got 11" in entry["exception_message"]
        assert "Traceback" in entry["traceback"]
