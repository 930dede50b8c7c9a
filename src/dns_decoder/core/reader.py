"""
DNS Datagram Reader

Cursor over a received DNS message buffer. Every read advances a single byte
offset; the record decoders rely on that offset to check that each record
consumed exactly its declared RDATA length.

Integers are read in network byte order. Domain names are decoded with
support for message compression (RFC 1035 section 4.1.4): following a pointer
never moves the cursor further than the two pointer bytes themselves.
"""

import ipaddress
import struct
from typing import List, Optional

from .exceptions import MalformedDataError
from .records import DnsName

DEFAULT_MAX_POINTER_JUMPS = 64
MAX_NAME_WIRE_LENGTH = 255

_STRING_SPECIALS = frozenset(b'";\\')
_LABEL_SPECIALS = frozenset(b'";\\.')


def _escape(data: bytes, specials: frozenset) -> str:
    parts = []
    for byte in data:
        if byte < 0x20 or byte > 0x7E:
            parts.append(f"\\{byte:03d}")
        elif byte in specials:
            parts.append("\\" + chr(byte))
        else:
            parts.append(chr(byte))
    return "".join(parts)


class DatagramReader:
    """Sequential reader over one DNS message."""

    def __init__(
        self,
        data: bytes,
        start_index: int = 0,
        max_pointer_jumps: int = DEFAULT_MAX_POINTER_JUMPS,
    ):
        """Initialize reader.

        Args:
            data: Complete DNS message. Compression pointers are offsets into
                this buffer, so it must start at the message header.
            start_index: Initial cursor position
            max_pointer_jumps: Upper bound on compression pointers followed
                while reading a single name
        """
        self._data = bytes(data)
        self._index = 0
        self.index = start_index
        self.max_pointer_jumps = max_pointer_jumps

    @property
    def index(self) -> int:
        """Current cursor offset from the start of the message"""
        return self._index

    @index.setter
    def index(self, value: int) -> None:
        if not 0 <= value <= len(self._data):
            raise MalformedDataError(
                f"Index {value} outside of buffer of {len(self._data)} bytes"
            )
        self._index = value

    @property
    def remaining(self) -> int:
        return len(self._data) - self._index

    def __len__(self) -> int:
        return len(self._data)

    def _require(self, length: int) -> None:
        if length > self.remaining:
            raise MalformedDataError(
                f"Cannot read {length} bytes, only {self.remaining} remaining",
                self._index,
            )

    def advance(self, length: int) -> None:
        """Skip ``length`` bytes without decoding them."""
        if length < 0:
            raise MalformedDataError(f"Cannot skip {length} bytes", self._index)
        self._require(length)
        self._index += length

    def read_byte(self) -> int:
        self._require(1)
        value = self._data[self._index]
        self._index += 1
        return value

    def read_uint16_network_order(self) -> int:
        self._require(2)
        (value,) = struct.unpack_from("!H", self._data, self._index)
        self._index += 2
        return value

    def read_uint32_network_order(self) -> int:
        self._require(4)
        (value,) = struct.unpack_from("!I", self._data, self._index)
        self._index += 4
        return value

    def read_bytes(self, length: int) -> bytes:
        if length < 0:
            raise MalformedDataError(f"Cannot read {length} bytes", self._index)
        self._require(length)
        value = self._data[self._index : self._index + length]
        self._index += length
        return value

    def read_ipv4_address(self) -> ipaddress.IPv4Address:
        return ipaddress.IPv4Address(self.read_bytes(4))

    def read_ipv6_address(self) -> ipaddress.IPv6Address:
        return ipaddress.IPv6Address(self.read_bytes(16))

    def read_string(self) -> str:
        """Read a character-string: one length byte followed by the payload.

        Returns:
            The payload in escaped presentation form
        """
        length = self.read_byte()
        return self.parse_string(self.read_bytes(length))

    @staticmethod
    def parse_string(data: bytes) -> str:
        """Escaped presentation form of raw bytes.

        Bytes outside printable ASCII become ``\\DDD``; quote, semicolon and
        backslash are prefixed with a backslash.
        """
        return _escape(data, _STRING_SPECIALS)

    @staticmethod
    def read_utf8_string(data: bytes, errors: str = "replace") -> str:
        return bytes(data).decode("utf-8", errors=errors)

    def read_name(self) -> DnsName:
        """Read a possibly compressed domain name.

        Returns:
            Fully expanded name. The cursor ends right after the name's
            encoding at the current location (after the first pointer if
            the name is compressed).

        Raises:
            MalformedDataError: On truncation, unsupported label types,
                forward or looping pointers, or names over 255 bytes
        """
        data = self._data
        labels: List[str] = []
        offset = self._index
        resume_at: Optional[int] = None
        jumps = 0
        wire_length = 1

        while True:
            if offset >= len(data):
                raise MalformedDataError("Name runs past end of data", offset)

            length = data[offset]

            if length == 0:
                offset += 1
                break
            elif (length & 0xC0) == 0xC0:
                if offset + 1 >= len(data):
                    raise MalformedDataError("Truncated compression pointer", offset)
                pointer = ((length & 0x3F) << 8) | data[offset + 1]
                if pointer >= offset:
                    raise MalformedDataError(
                        f"Compression pointer to {pointer} does not point backwards",
                        offset,
                    )
                jumps += 1
                if jumps > self.max_pointer_jumps:
                    raise MalformedDataError("Too many compression pointers", offset)
                if resume_at is None:
                    resume_at = offset + 2
                offset = pointer
            elif length & 0xC0:
                raise MalformedDataError(
                    f"Unsupported label type 0x{length & 0xC0:02x}", offset
                )
            else:
                if offset + 1 + length > len(data):
                    raise MalformedDataError("Label length exceeds data", offset)
                wire_length += length + 1
                if wire_length > MAX_NAME_WIRE_LENGTH:
                    raise MalformedDataError("Name longer than 255 bytes", offset)
                labels.append(
                    _escape(data[offset + 1 : offset + 1 + length], _LABEL_SPECIALS)
                )
                offset += length + 1

        self._index = resume_at if resume_at is not None else offset
        return DnsName(tuple(labels))
