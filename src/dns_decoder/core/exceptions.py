"""
Decoder Exceptions

Errors raised while reading DNS wire data. Nothing here is recoverable at the
record level: once any of these is raised, the cursor position can no longer
be trusted and the rest of the message must be discarded.
"""

from typing import Optional, Union


class DnsDecodeError(Exception):
    """Base class for all decoding errors."""


class MalformedDataError(DnsDecodeError, ValueError):
    """Input bytes do not form valid wire data (overrun, bad label, bad pointer)."""

    def __init__(self, message: str, offset: Optional[int] = None):
        if offset is not None:
            message = f"{message} [offset={offset}]"
        super().__init__(message)
        self.offset = offset


class DerivedLengthError(MalformedDataError):
    """A length computed from RDLENGTH minus fixed overhead is negative."""

    def __init__(self, record_type: str, length: int, offset: Optional[int] = None):
        super().__init__(
            f"Invalid derived length {length} for {record_type} record", offset
        )
        self.record_type = record_type
        self.length = length


class RecordDesyncError(DnsDecodeError):
    """A record decoder consumed a different number of bytes than RDLENGTH."""

    def __init__(
        self, record_type: Union[int, str], expected_index: int, actual_index: int
    ):
        super().__init__(
            f"Record reader index out of sync for type {record_type}: "
            f"expected {expected_index}, got {actual_index}"
        )
        self.record_type = record_type
        self.expected_index = expected_index
        self.actual_index = actual_index
