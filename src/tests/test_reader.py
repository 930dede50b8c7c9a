"""Tests for the datagram reader (cursor, integers, strings and names)."""

import ipaddress

import pytest

from dns_decoder.core.exceptions import MalformedDataError
from dns_decoder.core.reader import DatagramReader
from dns_decoder.core.records import DnsName


def encode_name(name: str) -> bytes:
    """Encode domain name using DNS label encoding"""
    if name == ".":
        return b"\x00"

    result = b""
    for label in name.rstrip(".").split("."):
        label_bytes = label.encode("ascii")
        result += bytes([len(label_bytes)]) + label_bytes
    return result + b"\x00"


class TestPrimitiveReads:
    """Test fixed width reads and cursor movement"""

    def test_integers_are_network_order(self):
        """Test 8, 16 and 32 bit reads"""
        reader = DatagramReader(b"\x07\x01\x02\xde\xad\xbe\xef")

        assert reader.read_byte() == 7
        assert reader.read_uint16_network_order() == 0x0102
        assert reader.read_uint32_network_order() == 0xDEADBEEF
        assert reader.index == 7
        assert reader.remaining == 0

    def test_addresses(self):
        """Test IPv4 and IPv6 address reads"""
        v6 = ipaddress.IPv6Address("2001:db8::1")
        reader = DatagramReader(bytes([192, 0, 2, 1]) + v6.packed)

        assert reader.read_ipv4_address() == ipaddress.IPv4Address("192.0.2.1")
        assert reader.read_ipv6_address() == v6
        assert reader.index == 20

    def test_read_past_end(self):
        """Test that reads beyond the buffer raise"""
        reader = DatagramReader(b"\x01\x02\x03")

        with pytest.raises(MalformedDataError, match="Cannot read 4 bytes"):
            reader.read_uint32_network_order()
        assert reader.index == 0

    def test_negative_read_length(self):
        """Test that negative lengths are rejected"""
        reader = DatagramReader(b"\x00" * 8)

        with pytest.raises(MalformedDataError):
            reader.read_bytes(-1)
        with pytest.raises(MalformedDataError):
            reader.advance(-3)

    def test_advance(self):
        """Test skipping bytes"""
        reader = DatagramReader(b"\x00" * 8, start_index=2)
        reader.advance(5)

        assert reader.index == 7
        with pytest.raises(MalformedDataError):
            reader.advance(2)

    def test_index_setter_bounds(self):
        """Test that the index cannot leave the buffer"""
        reader = DatagramReader(b"\x00" * 4)
        reader.index = 4
        assert reader.remaining == 0

        with pytest.raises(MalformedDataError):
            reader.index = 5
        with pytest.raises(MalformedDataError):
            reader.index = -1


class TestStrings:
    """Test character-string decoding"""

    def test_read_string(self):
        """Test length prefixed string"""
        reader = DatagramReader(b"\x05hello\x00")

        assert reader.read_string() == "hello"
        assert reader.index == 6
        assert reader.read_string() == ""

    def test_parse_string_escapes(self):
        """Test escaping of special and non printable bytes"""
        assert DatagramReader.parse_string(b'a"b;c\\d') == 'a\\"b\\;c\\\\d'
        assert DatagramReader.parse_string(b"\x00\x1f\x7f") == "\\000\\031\\127"
        assert DatagramReader.parse_string("é".encode("utf-8")) == "\\195\\169"

    def test_read_utf8_string(self):
        """Test UTF-8 decoding with error handlers"""
        assert DatagramReader.read_utf8_string("héllo".encode("utf-8")) == "héllo"
        assert DatagramReader.read_utf8_string(b"a\xffb") == "a�b"
        assert DatagramReader.read_utf8_string(b"a\xffb", "ignore") == "ab"
        with pytest.raises(UnicodeDecodeError):
            DatagramReader.read_utf8_string(b"a\xffb", "strict")


class TestNames:
    """Test domain name decoding"""

    def test_plain_name(self):
        """Test an uncompressed name"""
        reader = DatagramReader(encode_name("www.example.com.") + b"\xff")

        name = reader.read_name()

        assert name == DnsName(("www", "example", "com"))
        assert str(name) == "www.example.com."
        assert reader.index == 17

    def test_root_name(self):
        """Test the root name"""
        reader = DatagramReader(b"\x00")

        name = reader.read_name()

        assert name.is_root
        assert str(name) == "."
        assert reader.index == 1

    def test_compressed_name_leaves_cursor_after_pointer(self):
        """Test that following a pointer does not relocate the cursor"""
        data = encode_name("example.com.") + b"\x03www\xc0\x00" + b"\xaa\xbb"
        reader = DatagramReader(data, start_index=13)

        name = reader.read_name()

        assert str(name) == "www.example.com."
        assert reader.index == 13 + 4 + 2

    def test_fully_compressed_name(self):
        """Test a name that is only a pointer"""
        data = encode_name("example.com.") + b"\xc0\x00"
        reader = DatagramReader(data, start_index=13)

        assert str(reader.read_name()) == "example.com."
        assert reader.index == 15

    def test_chained_pointers(self):
        """Test a pointer to a name that itself ends in a pointer"""
        data = encode_name("com.") + b"\x07example\xc0\x00" + b"\x03ftp\xc0\x05"
        reader = DatagramReader(data, start_index=15)

        assert str(reader.read_name()) == "ftp.example.com."
        assert reader.index == len(data)

    def test_forward_pointer_rejected(self):
        """Test that pointers must point to earlier data"""
        reader = DatagramReader(b"\xc0\x02\x00")

        with pytest.raises(MalformedDataError, match="does not point backwards"):
            reader.read_name()

    def test_pointer_loop_rejected(self):
        """Test that a looping pointer chain is cut off"""
        reader = DatagramReader(b"\x01a\xc0\x00", max_pointer_jumps=4)

        with pytest.raises(MalformedDataError, match="Too many compression pointers"):
            reader.read_name()

    def test_truncated_name(self):
        """Test labels running past the buffer"""
        with pytest.raises(MalformedDataError):
            DatagramReader(b"\x05abc").read_name()
        with pytest.raises(MalformedDataError):
            DatagramReader(b"\x03abc").read_name()
        with pytest.raises(MalformedDataError, match="Truncated compression pointer"):
            DatagramReader(b"\xc0").read_name()

    def test_extended_label_type_rejected(self):
        """Test that 0x40 and 0x80 label types are not accepted"""
        with pytest.raises(MalformedDataError, match="Unsupported label type"):
            DatagramReader(b"\x41\x00").read_name()

    def test_name_too_long(self):
        """Test the 255 byte limit on expanded names"""
        data = (b"\x3f" + b"a" * 63) * 4 + b"\x00"

        with pytest.raises(MalformedDataError, match="longer than 255"):
            DatagramReader(data).read_name()

    def test_label_escaping(self):
        """Test that dots and non printable bytes inside labels are escaped"""
        reader = DatagramReader(b"\x03a.b\x02\x00z\x00")

        name = reader.read_name()

        assert name.labels == ("a\\.b", "\\000z")
        assert DnsName.from_string(str(name)) == name

    @pytest.mark.parametrize(
        "text,labels",
        [
            ("example.com.", ("example", "com")),
            ("example.com", ("example", "com")),
            (".", ()),
            ("a\\.b.c.", ("a\\.b", "c")),
            ("a\\\\.b.", ("a\\\\", "b")),
            ("end\\.", ("end\\.",)),
            ("\\046x.y", ("\\046x", "y")),
        ],
    )
    def test_name_from_string(self, text, labels):
        """Test splitting presentation names on unescaped dots only"""
        assert DnsName.from_string(text).labels == labels

    def test_backslash_label_round_trip(self):
        """Test a label ending in a backslash read from the wire"""
        name = DatagramReader(b"\x02a\\\x01b\x00").read_name()

        assert name.labels == ("a\\\\", "b")
        assert DnsName.from_string(str(name)) == name
