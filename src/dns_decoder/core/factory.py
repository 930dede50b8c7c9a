"""
DNS Record Factory

Decodes resource records from a DatagramReader positioned inside a message.

Wire layout of a resource record (RFC 1035 section 4.1.3):

      0  1  2  3  4  5  6  7  8  9  0  1  2  3  4  5
    +--+--+--+--+--+--+--+--+--+--+--+--+--+--+--+--+
    /                      NAME                     /
    +--+--+--+--+--+--+--+--+--+--+--+--+--+--+--+--+
    |                      TYPE                     |
    +--+--+--+--+--+--+--+--+--+--+--+--+--+--+--+--+
    |                     CLASS                     |
    +--+--+--+--+--+--+--+--+--+--+--+--+--+--+--+--+
    |                      TTL                      |
    |                                               |
    +--+--+--+--+--+--+--+--+--+--+--+--+--+--+--+--+
    |                   RDLENGTH                    |
    +--+--+--+--+--+--+--+--+--+--+--+--+--+--+--+--|
    /                     RDATA                     /
    +--+--+--+--+--+--+--+--+--+--+--+--+--+--+--+--+

``read_descriptor`` reads everything up to RDLENGTH, ``decode_body`` reads
RDATA and checks that exactly RDLENGTH bytes were consumed.
"""

from typing import Callable, Dict, Optional

from ..config.schema import DecoderSettings
from ..dns_logging import get_logger
from .exceptions import DerivedLengthError, RecordDesyncError
from .reader import DatagramReader
from .records import (
    AaaaRecord,
    AfsDbRecord,
    AfsType,
    ARecord,
    CaaRecord,
    CNameRecord,
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
    type_name,
)

# address (4) + protocol (1)
WKS_FIXED_LENGTH = 5
# flags (1) + tag length (1)
CAA_FIXED_LENGTH = 2


class RecordFactory:
    """Reads record envelopes and bodies from a shared reader."""

    def __init__(
        self, reader: DatagramReader, settings: Optional[DecoderSettings] = None
    ):
        if reader is None:
            raise ValueError("reader is required")

        self._reader = reader
        self.settings = settings or DecoderSettings()
        self.logger = get_logger(__name__)
        self._decoders: Dict[
            ResourceRecordType, Callable[[RecordDescriptor], ResourceRecord]
        ] = {
            ResourceRecordType.A: self._read_a,
            ResourceRecordType.NS: self._read_ns,
            ResourceRecordType.CNAME: self._read_cname,
            ResourceRecordType.SOA: self._read_soa,
            ResourceRecordType.MB: self._read_mb,
            ResourceRecordType.MG: self._read_mg,
            ResourceRecordType.MR: self._read_mr,
            ResourceRecordType.NULL: self._read_null,
            ResourceRecordType.WKS: self._read_wks,
            ResourceRecordType.PTR: self._read_ptr,
            ResourceRecordType.HINFO: self._read_hinfo,
            ResourceRecordType.MINFO: self._read_minfo,
            ResourceRecordType.MX: self._read_mx,
            ResourceRecordType.TXT: self._read_txt,
            ResourceRecordType.RP: self._read_rp,
            ResourceRecordType.AFSDB: self._read_afsdb,
            ResourceRecordType.AAAA: self._read_aaaa,
            ResourceRecordType.SRV: self._read_srv,
            ResourceRecordType.OPT: self._read_opt,
            ResourceRecordType.CAA: self._read_caa,
        }

    @property
    def reader(self) -> DatagramReader:
        return self._reader

    def read_descriptor(self) -> RecordDescriptor:
        """Read NAME, TYPE, CLASS, TTL and RDLENGTH.

        The TTL is read unsigned and stored as signed 32-bit, wire values
        above 2**31 - 1 become negative.
        """
        return RecordDescriptor(
            name=self._reader.read_name(),
            record_type=ResourceRecordType.from_code(
                self._reader.read_uint16_network_order()
            ),
            record_class=QueryClass.from_code(self._reader.read_uint16_network_order()),
            time_to_live=to_signed_int32(self._reader.read_uint32_network_order()),
            raw_data_length=self._reader.read_uint16_network_order(),
        )

    def decode_body(self, info: RecordDescriptor) -> ResourceRecord:
        """Decode RDATA for ``info`` from the current reader position.

        Raises:
            RecordDesyncError: If the decoder consumed more or fewer bytes
                than ``info.raw_data_length``
            MalformedDataError: On reads past the buffer or invalid lengths
        """
        if info is None:
            raise ValueError("info is required")

        start_index = self._reader.index
        decoder = self._decoders.get(info.record_type)

        if decoder is None:
            if self.settings.log_unknown_types:
                self.logger.debug(
                    "Skipping record of unknown type",
                    record_type=type_name(info.record_type),
                    raw_data_length=info.raw_data_length,
                    index=start_index,
                )
            self._reader.advance(info.raw_data_length)
            result = EmptyRecord(info)
        else:
            result = decoder(info)

        expected_index = start_index + info.raw_data_length
        if self._reader.index != expected_index:
            self.logger.error(
                "Record reader index out of sync",
                record_type=type_name(info.record_type),
                owner=str(info.name),
                expected_index=expected_index,
                actual_index=self._reader.index,
            )
            raise RecordDesyncError(
                type_name(info.record_type), expected_index, self._reader.index
            )

        return result

    def read_record(self) -> ResourceRecord:
        """Read a complete record: envelope followed by body."""
        return self.decode_body(self.read_descriptor())

    def _read_a(self, info: RecordDescriptor) -> ARecord:
        return ARecord(info, self._reader.read_ipv4_address())

    def _read_aaaa(self, info: RecordDescriptor) -> AaaaRecord:
        return AaaaRecord(info, self._reader.read_ipv6_address())

    def _read_ns(self, info: RecordDescriptor) -> NsRecord:
        return NsRecord(info, self._reader.read_name())

    def _read_cname(self, info: RecordDescriptor) -> CNameRecord:
        return CNameRecord(info, self._reader.read_name())

    def _read_mb(self, info: RecordDescriptor) -> MbRecord:
        return MbRecord(info, self._reader.read_name())

    def _read_mg(self, info: RecordDescriptor) -> MgRecord:
        return MgRecord(info, self._reader.read_name())

    def _read_mr(self, info: RecordDescriptor) -> MrRecord:
        return MrRecord(info, self._reader.read_name())

    def _read_ptr(self, info: RecordDescriptor) -> PtrRecord:
        return PtrRecord(info, self._reader.read_name())

    def _read_soa(self, info: RecordDescriptor) -> SoaRecord:
        mname = self._reader.read_name()
        rname = self._reader.read_name()
        serial = self._reader.read_uint32_network_order()
        refresh = self._reader.read_uint32_network_order()
        retry = self._reader.read_uint32_network_order()
        expire = self._reader.read_uint32_network_order()
        minimum = self._reader.read_uint32_network_order()

        return SoaRecord(info, mname, rname, serial, refresh, retry, expire, minimum)

    def _read_null(self, info: RecordDescriptor) -> NullRecord:
        return NullRecord(info, self._reader.read_bytes(info.raw_data_length))

    def _read_wks(self, info: RecordDescriptor) -> WksRecord:
        bitmap_length = info.raw_data_length - WKS_FIXED_LENGTH
        if bitmap_length < 0:
            raise DerivedLengthError("WKS", bitmap_length, self._reader.index)

        address = self._reader.read_ipv4_address()
        protocol = self._reader.read_byte()
        bitmap = self._reader.read_bytes(bitmap_length)

        return WksRecord(info, address, protocol, bitmap)

    def _read_hinfo(self, info: RecordDescriptor) -> HInfoRecord:
        cpu = self._reader.read_string()
        os_name = self._reader.read_string()
        return HInfoRecord(info, cpu, os_name)

    def _read_minfo(self, info: RecordDescriptor) -> MInfoRecord:
        rmailbox = self._reader.read_name()
        emailbox = self._reader.read_name()
        return MInfoRecord(info, rmailbox, emailbox)

    def _read_mx(self, info: RecordDescriptor) -> MxRecord:
        preference = self._reader.read_uint16_network_order()
        exchange = self._reader.read_name()

        return MxRecord(info, preference, exchange)

    def _read_txt(self, info: RecordDescriptor) -> TxtRecord:
        start_index = self._reader.index

        escaped_values = []
        utf8_values = []
        # An entry running past RDLENGTH leaves the index beyond the
        # expected end and is reported by decode_body.
        while self._reader.index - start_index < info.raw_data_length:
            length = self._reader.read_byte()
            data = self._reader.read_bytes(length)
            escaped_values.append(DatagramReader.parse_string(data))
            utf8_values.append(
                DatagramReader.read_utf8_string(data, self.settings.utf8_errors)
            )

        return TxtRecord(info, tuple(escaped_values), tuple(utf8_values))

    def _read_rp(self, info: RecordDescriptor) -> RpRecord:
        mailbox_domain = self._reader.read_name()
        text_domain = self._reader.read_name()
        return RpRecord(info, mailbox_domain, text_domain)

    def _read_afsdb(self, info: RecordDescriptor) -> AfsDbRecord:
        subtype = AfsType.from_code(self._reader.read_uint16_network_order())
        hostname = self._reader.read_name()
        return AfsDbRecord(info, subtype, hostname)

    def _read_srv(self, info: RecordDescriptor) -> SrvRecord:
        priority = self._reader.read_uint16_network_order()
        weight = self._reader.read_uint16_network_order()
        port = self._reader.read_uint16_network_order()
        target = self._reader.read_name()

        return SrvRecord(info, priority, weight, port, target)

    def _read_opt(self, info: RecordDescriptor) -> OptRecord:
        # Options are interpreted by the caller; only step over them.
        self._reader.advance(info.raw_data_length)
        return OptRecord.from_descriptor(info)

    def _read_caa(self, info: RecordDescriptor) -> CaaRecord:
        flags = self._reader.read_byte()
        tag_length = self._reader.read_byte()
        value_length = info.raw_data_length - CAA_FIXED_LENGTH - tag_length
        if value_length < 0:
            raise DerivedLengthError("CAA", value_length, self._reader.index)

        tag = DatagramReader.parse_string(self._reader.read_bytes(tag_length))
        value = DatagramReader.parse_string(self._reader.read_bytes(value_length))

        return CaaRecord(info, flags, tag, value)
