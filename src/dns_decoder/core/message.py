"""
DNS Response Message Reader

This module reads complete DNS messages received from a server:
- DNS header parsing with flag decomposition
- Question section
- Answer/Authority/Additional sections decoded into typed records

All sections share one DatagramReader, so compression pointers resolve
against the whole message and each record is checked for consumption of
exactly its RDLENGTH before the next one is read.
"""

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from ..config.loader import resolve_config
from ..config.schema import DecoderConfig
from ..dns_logging import get_logger
from .exceptions import MalformedDataError
from .factory import RecordFactory
from .reader import DatagramReader
from .records import (
    DnsName,
    OptRecord,
    QueryClass,
    ResourceRecord,
    ResourceRecordType,
    class_name,
    type_name,
)

HEADER_LENGTH = 12


class DnsOpcode(IntEnum):
    """DNS Operation Codes"""

    QUERY = 0
    IQUERY = 1
    STATUS = 2
    NOTIFY = 4
    UPDATE = 5


class DnsResponseCode(IntEnum):
    """DNS Response Codes"""

    NOERROR = 0
    FORMERR = 1
    SERVFAIL = 2
    NXDOMAIN = 3
    NOTIMP = 4
    REFUSED = 5
    YXDOMAIN = 6
    YXRRSET = 7
    NXRRSET = 8
    NOTAUTH = 9
    NOTZONE = 10


@dataclass(frozen=True)
class DnsHeader:
    """DNS Message Header"""

    transaction_id: int
    flags: int
    question_count: int = 0
    answer_count: int = 0
    authority_count: int = 0
    additional_count: int = 0

    @staticmethod
    def parse_flags(flags: int) -> Dict[str, Union[bool, int]]:
        """Parse flags field into individual components"""
        return {
            "qr": bool(flags & 0x8000),
            "opcode": (flags >> 11) & 0x0F,
            "aa": bool(flags & 0x0400),
            "tc": bool(flags & 0x0200),
            "rd": bool(flags & 0x0100),
            "ra": bool(flags & 0x0080),
            "z": (flags >> 4) & 0x07,
            "rcode": flags & 0x0F,
        }

    @property
    def qr(self) -> bool:
        return bool(self.flags & 0x8000)

    @property
    def opcode(self) -> int:
        return (self.flags >> 11) & 0x0F

    @property
    def aa(self) -> bool:
        return bool(self.flags & 0x0400)

    @property
    def tc(self) -> bool:
        return bool(self.flags & 0x0200)

    @property
    def rd(self) -> bool:
        return bool(self.flags & 0x0100)

    @property
    def ra(self) -> bool:
        return bool(self.flags & 0x0080)

    @property
    def rcode(self) -> int:
        return self.flags & 0x0F

    @classmethod
    def read(cls, reader: DatagramReader) -> "DnsHeader":
        """Read the 12 byte header at the reader's position"""
        if reader.remaining < HEADER_LENGTH:
            raise MalformedDataError("Invalid DNS header: too short", reader.index)

        return cls(
            transaction_id=reader.read_uint16_network_order(),
            flags=reader.read_uint16_network_order(),
            question_count=reader.read_uint16_network_order(),
            answer_count=reader.read_uint16_network_order(),
            authority_count=reader.read_uint16_network_order(),
            additional_count=reader.read_uint16_network_order(),
        )


@dataclass(frozen=True)
class DnsQuestion:
    """DNS Question Section"""

    name: DnsName
    qtype: Union[ResourceRecordType, int]
    qclass: Union[QueryClass, int]

    @classmethod
    def read(cls, reader: DatagramReader) -> "DnsQuestion":
        name = reader.read_name()
        qtype = ResourceRecordType.from_code(reader.read_uint16_network_order())
        qclass = QueryClass.from_code(reader.read_uint16_network_order())
        return cls(name=name, qtype=qtype, qclass=qclass)

    def __str__(self) -> str:
        return f"{self.name} {class_name(self.qclass)} {type_name(self.qtype)}"


@dataclass(frozen=True)
class DnsResponseMessage:
    """Complete decoded DNS Message"""

    header: DnsHeader
    questions: Tuple[DnsQuestion, ...] = ()
    answers: Tuple[ResourceRecord, ...] = ()
    authorities: Tuple[ResourceRecord, ...] = ()
    additionals: Tuple[ResourceRecord, ...] = ()

    @property
    def response_code(self) -> Union[DnsResponseCode, int]:
        """RCODE including the extended bits carried by an OPT record"""
        rcode = self.header.rcode
        opt = self.opt_record
        if opt is not None:
            rcode |= opt.extended_rcode << 4
        try:
            return DnsResponseCode(rcode)
        except ValueError:
            return rcode

    @property
    def opt_record(self) -> Optional[OptRecord]:
        for record in self.additionals:
            if isinstance(record, OptRecord):
                return record
        return None

    def is_response(self) -> bool:
        """Check if this is a response message"""
        return self.header.qr

    @classmethod
    def from_bytes(
        cls, data: bytes, config: Union[DecoderConfig, str, Path, None] = None
    ) -> "DnsResponseMessage":
        """Decode a complete DNS message.

        Args:
            data: Message as received from the wire
            config: Decoder configuration, or the path of a YAML file to
                load it from; defaults apply when omitted

        Raises:
            MalformedDataError: On truncated or invalid data
            RecordDesyncError: If any record body is inconsistent with its
                RDLENGTH; the remainder of the message is not decoded
        """
        config = resolve_config(config)
        logger = get_logger(__name__)

        reader = DatagramReader(
            data, max_pointer_jumps=config.decoder.max_pointer_jumps
        )
        factory = RecordFactory(reader, config.decoder)

        header = DnsHeader.read(reader)
        questions = tuple(
            DnsQuestion.read(reader) for _ in range(header.question_count)
        )
        answers = tuple(factory.read_record() for _ in range(header.answer_count))
        authorities = tuple(
            factory.read_record() for _ in range(header.authority_count)
        )
        additionals = tuple(
            factory.read_record() for _ in range(header.additional_count)
        )

        if reader.remaining:
            logger.debug(
                "Trailing bytes after last record",
                transaction_id=header.transaction_id,
                trailing=reader.remaining,
            )

        logger.debug(
            "Decoded DNS message",
            transaction_id=header.transaction_id,
            questions=len(questions),
            answers=len(answers),
            authorities=len(authorities),
            additionals=len(additionals),
        )

        return cls(
            header=header,
            questions=questions,
            answers=answers,
            authorities=authorities,
            additionals=additionals,
        )
