"""
DNS Record Decoder Core Module

This module exports the wire-format reader, the record factory and the
decoded record types.
"""

from .exceptions import (
    DerivedLengthError,
    DnsDecodeError,
    MalformedDataError,
    RecordDesyncError,
)
from .factory import RecordFactory
from .message import (
    DnsHeader,
    DnsOpcode,
    DnsQuestion,
    DnsResponseCode,
    DnsResponseMessage,
)
from .reader import DatagramReader
from .records import (
    AaaaRecord,
    AfsDbRecord,
    AfsType,
    ARecord,
    CaaRecord,
    CNameRecord,
    DnsName,
    DnsResourceRecord,
    EmptyRecord,
    HInfoRecord,
    MbRecord,
    MgRecord,
    MInfoRecord,
    MrRecord,
    MxRecord,
    NsRecord,
    NullRecord,
    OptRecord,
    PtrRecord,
    QueryClass,
    RecordDescriptor,
    ResourceRecord,
    ResourceRecordType,
    RpRecord,
    SoaRecord,
    SrvRecord,
    TxtRecord,
    WksRecord,
    to_signed_int32,
)

__all__ = [
    # Reader and factory
    "DatagramReader",
    "RecordFactory",
    # Messages
    "DnsResponseMessage",
    "DnsHeader",
    "DnsQuestion",
    # Errors
    "DnsDecodeError",
    "MalformedDataError",
    "DerivedLengthError",
    "RecordDesyncError",
    # Enums
    "ResourceRecordType",
    "QueryClass",
    "AfsType",
    "DnsOpcode",
    "DnsResponseCode",
    # Records
    "DnsName",
    "RecordDescriptor",
    "DnsResourceRecord",
    "ResourceRecord",
    "EmptyRecord",
    "ARecord",
    "AaaaRecord",
    "NsRecord",
    "CNameRecord",
    "MbRecord",
    "MgRecord",
    "MrRecord",
    "PtrRecord",
    "SoaRecord",
    "NullRecord",
    "WksRecord",
    "HInfoRecord",
    "MInfoRecord",
    "MxRecord",
    "TxtRecord",
    "RpRecord",
    "AfsDbRecord",
    "SrvRecord",
    "CaaRecord",
    "OptRecord",
    # Helpers
    "to_signed_int32",
]
