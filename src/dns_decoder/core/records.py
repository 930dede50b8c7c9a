"""
DNS Resource Record Types

This module defines the immutable values produced by the record decoder:
- record type, class and AFS subtype codes
- decoded domain names
- the record descriptor (the envelope common to every record)
- one dataclass per supported record type, plus EmptyRecord for unknown types
"""

import ipaddress
from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple, Union


class ResourceRecordType(IntEnum):
    """DNS Record Types with a dedicated decoder"""

    A = 1
    NS = 2
    CNAME = 5
    SOA = 6
    MB = 7
    MG = 8
    MR = 9
    NULL = 10
    WKS = 11
    PTR = 12
    HINFO = 13
    MINFO = 14
    MX = 15
    TXT = 16
    RP = 17
    AFSDB = 18
    AAAA = 28
    SRV = 33
    OPT = 41
    CAA = 257

    @classmethod
    def from_code(cls, code: int) -> Union["ResourceRecordType", int]:
        """Return the enum member for ``code`` or the raw code if unknown."""
        try:
            return cls(code)
        except ValueError:
            return code


class QueryClass(IntEnum):
    """DNS Classes"""

    IN = 1
    CS = 2
    CH = 3
    HS = 4
    NONE = 254
    ANY = 255

    @classmethod
    def from_code(cls, code: int) -> Union["QueryClass", int]:
        """Return the enum member for ``code`` or the raw code if unknown."""
        try:
            return cls(code)
        except ValueError:
            return code


class AfsType(IntEnum):
    """AFSDB subtypes (RFC 1183)"""

    AFS = 1
    DCE = 2

    @classmethod
    def from_code(cls, code: int) -> Union["AfsType", int]:
        try:
            return cls(code)
        except ValueError:
            return code


def type_name(record_type: Union[ResourceRecordType, int]) -> str:
    """Mnemonic for a record type, ``TYPEnnn`` for unknown codes (RFC 3597)."""
    if isinstance(record_type, ResourceRecordType):
        return record_type.name
    return f"TYPE{int(record_type)}"


def class_name(record_class: Union[QueryClass, int]) -> str:
    """Mnemonic for a record class, ``CLASSnnn`` for unknown codes."""
    if isinstance(record_class, QueryClass):
        return record_class.name
    return f"CLASS{int(record_class)}"


def to_signed_int32(value: int) -> int:
    """Reinterpret an unsigned 32-bit value as two's complement signed.

    Wire TTLs are unsigned, descriptors store them signed: values above
    ``2**31 - 1`` wrap to negative (``0xFFFFFFFF`` becomes ``-1``).
    """
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _split_labels(name: str) -> Tuple[str, ...]:
    """Split dotted presentation form, keeping escapes inside their label."""
    labels = []
    current = []
    position = 0
    while position < len(name):
        char = name[position]
        if char == "\\":
            current.append(name[position : position + 2])
            position += 2
            continue
        if char == ".":
            labels.append("".join(current))
            current = []
        else:
            current.append(char)
        position += 1

    if current:
        labels.append("".join(current))
    return tuple(labels)


@dataclass(frozen=True)
class DnsName:
    """Domain name as a sequence of presentation-escaped labels"""

    labels: Tuple[str, ...] = ()

    @property
    def value(self) -> str:
        """Fully qualified name with trailing dot, ``.`` for the root"""
        if not self.labels:
            return "."
        return ".".join(self.labels) + "."

    @property
    def is_root(self) -> bool:
        return not self.labels

    @classmethod
    def from_string(cls, name: str) -> "DnsName":
        """Build a name from dotted presentation form."""
        if name in ("", "."):
            return cls()
        return cls(_split_labels(name))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class RecordDescriptor:
    """Envelope common to every resource record.

    Attributes:
        name: Owner name of the record
        record_type: Type code, a ResourceRecordType member when known
        record_class: Class code, a QueryClass member when known. OPT records
            carry the requester's UDP payload size here.
        time_to_live: TTL as a signed 32-bit value, see ``to_signed_int32``.
            OPT records carry packed extended RCODE, version and flags here.
        raw_data_length: RDLENGTH, the exact number of RDATA bytes
    """

    name: DnsName
    record_type: Union[ResourceRecordType, int]
    record_class: Union[QueryClass, int]
    time_to_live: int
    raw_data_length: int


@dataclass(frozen=True)
class DnsResourceRecord:
    """Fields shared by all decoded records"""

    info: RecordDescriptor

    @property
    def domain_name(self) -> DnsName:
        return self.info.name

    @property
    def record_type(self) -> Union[ResourceRecordType, int]:
        return self.info.record_type

    @property
    def record_class(self) -> Union[QueryClass, int]:
        return self.info.record_class

    @property
    def time_to_live(self) -> int:
        return self.info.time_to_live

    @property
    def raw_data_length(self) -> int:
        return self.info.raw_data_length

    def record_to_string(self) -> str:
        """RDATA in master file presentation form"""
        return ""

    def __str__(self) -> str:
        return (
            f"{self.info.name} {self.info.time_to_live} "
            f"{class_name(self.info.record_class)} {type_name(self.info.record_type)} "
            f"{self.record_to_string()}"
        ).rstrip()


@dataclass(frozen=True)
class EmptyRecord(DnsResourceRecord):
    """Record of a type without a decoder; its RDATA was skipped."""


@dataclass(frozen=True)
class ARecord(DnsResourceRecord):
    address: ipaddress.IPv4Address

    def record_to_string(self) -> str:
        return str(self.address)


@dataclass(frozen=True)
class AaaaRecord(DnsResourceRecord):
    address: ipaddress.IPv6Address

    def record_to_string(self) -> str:
        return str(self.address)


@dataclass(frozen=True)
class NsRecord(DnsResourceRecord):
    ns_name: DnsName

    def record_to_string(self) -> str:
        return str(self.ns_name)


@dataclass(frozen=True)
class CNameRecord(DnsResourceRecord):
    canonical_name: DnsName

    def record_to_string(self) -> str:
        return str(self.canonical_name)


@dataclass(frozen=True)
class MbRecord(DnsResourceRecord):
    mad_name: DnsName

    def record_to_string(self) -> str:
        return str(self.mad_name)


@dataclass(frozen=True)
class MgRecord(DnsResourceRecord):
    mg_name: DnsName

    def record_to_string(self) -> str:
        return str(self.mg_name)


@dataclass(frozen=True)
class MrRecord(DnsResourceRecord):
    new_name: DnsName

    def record_to_string(self) -> str:
        return str(self.new_name)


@dataclass(frozen=True)
class PtrRecord(DnsResourceRecord):
    ptr_domain_name: DnsName

    def record_to_string(self) -> str:
        return str(self.ptr_domain_name)


@dataclass(frozen=True)
class SoaRecord(DnsResourceRecord):
    """Start of authority. Timer fields are unsigned 32-bit values."""

    mname: DnsName
    rname: DnsName
    serial: int
    refresh: int
    retry: int
    expire: int
    minimum: int

    def record_to_string(self) -> str:
        return (
            f"{self.mname} {self.rname} {self.serial} {self.refresh} "
            f"{self.retry} {self.expire} {self.minimum}"
        )


@dataclass(frozen=True)
class NullRecord(DnsResourceRecord):
    anything: bytes

    def record_to_string(self) -> str:
        # RFC 3597 generic encoding
        return f"\\# {len(self.anything)} {self.anything.hex()}".rstrip()


@dataclass(frozen=True)
class WksRecord(DnsResourceRecord):
    """Well known services: address, IP protocol number and a port bitmap"""

    address: ipaddress.IPv4Address
    protocol: int
    bitmap: bytes

    @property
    def ports(self) -> Tuple[int, ...]:
        """Ports whose bit is set, most significant bit of byte 0 is port 0"""
        ports = []
        for byte_index, byte in enumerate(self.bitmap):
            for bit in range(8):
                if byte & (0x80 >> bit):
                    ports.append(byte_index * 8 + bit)
        return tuple(ports)

    def record_to_string(self) -> str:
        return " ".join(
            [str(self.address), str(self.protocol)] + [str(p) for p in self.ports]
        )


@dataclass(frozen=True)
class HInfoRecord(DnsResourceRecord):
    cpu: str
    os: str

    def record_to_string(self) -> str:
        return f'"{self.cpu}" "{self.os}"'


@dataclass(frozen=True)
class MInfoRecord(DnsResourceRecord):
    rmailbox: DnsName
    emailbox: DnsName

    def record_to_string(self) -> str:
        return f"{self.rmailbox} {self.emailbox}"


@dataclass(frozen=True)
class MxRecord(DnsResourceRecord):
    preference: int
    exchange: DnsName

    def record_to_string(self) -> str:
        return f"{self.preference} {self.exchange}"


@dataclass(frozen=True)
class TxtRecord(DnsResourceRecord):
    """Text strings, each kept in escaped and in UTF-8 form.

    Both tuples are filled at decode time from the same bytes and always
    have the same length.
    """

    escaped_text: Tuple[str, ...]
    text: Tuple[str, ...]

    def record_to_string(self) -> str:
        return " ".join(f'"{value}"' for value in self.escaped_text)


@dataclass(frozen=True)
class RpRecord(DnsResourceRecord):
    mailbox_domain: DnsName
    text_domain: DnsName

    def record_to_string(self) -> str:
        return f"{self.mailbox_domain} {self.text_domain}"


@dataclass(frozen=True)
class AfsDbRecord(DnsResourceRecord):
    subtype: Union[AfsType, int]
    hostname: DnsName

    def record_to_string(self) -> str:
        return f"{int(self.subtype)} {self.hostname}"


@dataclass(frozen=True)
class SrvRecord(DnsResourceRecord):
    priority: int
    weight: int
    port: int
    target: DnsName

    def record_to_string(self) -> str:
        return f"{self.priority} {self.weight} {self.port} {self.target}"


@dataclass(frozen=True)
class CaaRecord(DnsResourceRecord):
    flags: int
    tag: str
    value: str

    def record_to_string(self) -> str:
        return f'{self.flags} {self.tag} "{self.value}"'


@dataclass(frozen=True)
class OptRecord(DnsResourceRecord):
    """EDNS(0) pseudo-record (RFC 6891).

    The descriptor's class and TTL are not a class and a TTL here, they are
    reinterpreted bit patterns:

    - ``udp_size`` is the descriptor's record_class as a plain integer
    - ``raw_flags`` is the descriptor's time_to_live, extended RCODE (8 bits),
      version (8 bits), DO bit and 15 reserved bits
    - ``options_length`` is RDLENGTH; the options blob itself is left to the
      caller and is not part of this record
    """

    udp_size: int
    raw_flags: int
    options_length: int

    @classmethod
    def from_descriptor(cls, info: RecordDescriptor) -> "OptRecord":
        return cls(
            info=info,
            udp_size=int(info.record_class),
            raw_flags=info.time_to_live,
            options_length=info.raw_data_length,
        )

    @property
    def extended_rcode(self) -> int:
        return ((self.raw_flags & 0xFFFFFFFF) >> 24) & 0xFF

    @property
    def version(self) -> int:
        return ((self.raw_flags & 0xFFFFFFFF) >> 16) & 0xFF

    @property
    def dnssec_ok(self) -> bool:
        return bool(self.raw_flags & 0x8000)

    def record_to_string(self) -> str:
        return (
            f"udp={self.udp_size} version={self.version} "
            f"do={int(self.dnssec_ok)} ext_rcode={self.extended_rcode} "
            f"options={self.options_length}"
        )

    def __str__(self) -> str:
        return f"; OPT PSEUDOSECTION: {self.record_to_string()}"


ResourceRecord = Union[
    EmptyRecord,
    ARecord,
    AaaaRecord,
    NsRecord,
    CNameRecord,
    MbRecord,
    MgRecord,
    MrRecord,
    PtrRecord,
    SoaRecord,
    NullRecord,
    WksRecord,
    HInfoRecord,
    MInfoRecord,
    MxRecord,
    TxtRecord,
    RpRecord,
    AfsDbRecord,
    SrvRecord,
    CaaRecord,
    OptRecord,
]
