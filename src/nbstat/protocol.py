"""NBT name service packet encoding for the node status query.

Implements the wire format of the RFC 1002 NODE STATUS REQUEST and the
fixed parts of its response: a 12-byte header, a question (request) or
resource record (response), all integers big-endian.

Header flags word layout (RFC 1002 section 4.2.1.1)::

    bit 15     R        response flag
    bits 14-11 OPCODE
    bit 10     AA       authoritative answer
    bit 9      TC       truncated
    bit 8      RD       recursion desired
    bit 7      RA       recursion available
    bits 6-5            reserved
    bit 4      B        broadcast
    bits 3-0   RCODE
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import IntEnum

from nbstat.codec import Cursor, encode16, encode32
from nbstat.errors import InvalidArgumentError
from nbstat.names import NAME_FIELD_SIZE, WILDCARD_LABEL, encode_name_field

NBT_NAME_SERVICE_PORT = 137

HEADER_SIZE = 12
QUESTION_SIZE = NAME_FIELD_SIZE + 4
REQUEST_SIZE = HEADER_SIZE + QUESTION_SIZE
RR_SIZE = NAME_FIELD_SIZE + 10


class Opcode(IntEnum):
    """Header OPCODE values. Only QUERY is ever sent."""

    QUERY = 0x0
    REGISTRATION = 0x5
    RELEASE = 0x6
    WACK = 0x7
    REFRESH = 0x8


class RRType(IntEnum):
    """Question and resource record types."""

    A = 0x0001
    NS = 0x0002
    NULL = 0x000A
    NB = 0x0020
    NBSTAT = 0x0021


class RRClass(IntEnum):
    IN = 0x0001


@dataclass
class Header:
    """NBT name service packet header.

    Attributes:
        transaction_id: Opaque token echoed back by the responder.
        response: R bit; set on every response.
        opcode: 4-bit operation code.
        authoritative, truncated, recursion_desired, recursion_available,
        broadcast: NM_FLAGS bits.
        reserved: The two unused NM_FLAGS bits (bit 6 high, bit 5 low).
        rcode: 4-bit result code.
        qdcount, ancount, nscount, arcount: Section counts.
    """

    transaction_id: int
    response: bool = False
    opcode: int = Opcode.QUERY
    authoritative: bool = False
    truncated: bool = False
    recursion_desired: bool = False
    recursion_available: bool = False
    reserved: int = 0
    broadcast: bool = False
    rcode: int = 0
    qdcount: int = 0
    ancount: int = 0
    nscount: int = 0
    arcount: int = 0

    @property
    def flags(self) -> int:
        """Pack the sub-fields into the 16-bit flags word."""
        word = 0
        word |= (int(self.response) << 15) & 0x8000
        word |= (int(self.opcode) << 11) & 0x7800
        word |= (int(self.authoritative) << 10) & 0x0400
        word |= (int(self.truncated) << 9) & 0x0200
        word |= (int(self.recursion_desired) << 8) & 0x0100
        word |= (int(self.recursion_available) << 7) & 0x0080
        word |= (self.reserved << 5) & 0x0060
        word |= (int(self.broadcast) << 4) & 0x0010
        word |= self.rcode & 0x000F
        return word

    @classmethod
    def from_flags(cls, transaction_id: int, flags: int, **counts: int) -> Header:
        """Split a 16-bit flags word into a Header."""
        return cls(
            transaction_id=transaction_id,
            response=bool((flags >> 15) & 0x1),
            opcode=(flags >> 11) & 0xF,
            authoritative=bool((flags >> 10) & 0x1),
            truncated=bool((flags >> 9) & 0x1),
            recursion_desired=bool((flags >> 8) & 0x1),
            recursion_available=bool((flags >> 7) & 0x1),
            reserved=(flags >> 5) & 0x3,
            broadcast=bool((flags >> 4) & 0x1),
            rcode=flags & 0xF,
            **counts,
        )

    def encode(self) -> bytes:
        buf = bytearray(HEADER_SIZE)
        encode16(buf, self.transaction_id, 0)
        encode16(buf, self.flags, 2)
        encode16(buf, self.qdcount, 4)
        encode16(buf, self.ancount, 6)
        encode16(buf, self.nscount, 8)
        encode16(buf, self.arcount, 10)
        return bytes(buf)

    @classmethod
    def decode(cls, cursor: Cursor) -> Header:
        """Read a header from the cursor. Counts are not validated."""
        transaction_id = cursor.u16()
        flags = cursor.u16()
        return cls.from_flags(
            transaction_id,
            flags,
            qdcount=cursor.u16(),
            ancount=cursor.u16(),
            nscount=cursor.u16(),
            arcount=cursor.u16(),
        )


@dataclass(frozen=True)
class Question:
    """Question section: a 16-byte label plus type and class."""

    label: bytes = WILDCARD_LABEL
    qtype: int = RRType.NBSTAT
    qclass: int = RRClass.IN

    def encode(self) -> bytes:
        buf = bytearray(encode_name_field(self.label) + bytes(4))
        encode16(buf, self.qtype, NAME_FIELD_SIZE)
        encode16(buf, self.qclass, NAME_FIELD_SIZE + 2)
        return bytes(buf)


@dataclass(frozen=True)
class ResourceRecord:
    """Answer resource record envelope of a node status response.

    The name field is kept verbatim for diagnostics and never compared
    against the question.
    """

    name: bytes
    rr_type: int
    rr_class: int
    ttl: int
    rdlength: int

    def encode(self) -> bytes:
        buf = bytearray(RR_SIZE)
        buf[:NAME_FIELD_SIZE] = self.name.ljust(NAME_FIELD_SIZE, b"\x00")[:NAME_FIELD_SIZE]
        encode16(buf, self.rr_type, NAME_FIELD_SIZE)
        encode16(buf, self.rr_class, NAME_FIELD_SIZE + 2)
        encode32(buf, self.ttl, NAME_FIELD_SIZE + 4)
        encode16(buf, self.rdlength, NAME_FIELD_SIZE + 8)
        return bytes(buf)

    @classmethod
    def decode(cls, cursor: Cursor) -> ResourceRecord:
        name = cursor.take(NAME_FIELD_SIZE)
        return cls(
            name=name,
            rr_type=cursor.u16(),
            rr_class=cursor.u16(),
            ttl=cursor.u32(),
            rdlength=cursor.u16(),
        )


def default_transaction_id() -> int:
    """Transaction id derived from the process id, as nbtstat does."""
    return os.getpid() & 0xFFFF


@dataclass
class NodeStatusRequest:
    """A NODE STATUS REQUEST datagram.

    Attributes:
        transaction_id: 16-bit id expected back unchanged in the response.
        question: Defaults to the wildcard name, type NBSTAT, class IN.
    """

    transaction_id: int = field(default_factory=default_transaction_id)
    question: Question = field(default_factory=Question)

    @property
    def header(self) -> Header:
        return Header(
            transaction_id=self.transaction_id,
            opcode=Opcode.QUERY,
            qdcount=1,
        )

    def encode(self) -> bytes:
        """Encode the request to its 50-byte wire form."""
        if not 0 <= self.transaction_id <= 0xFFFF:
            raise InvalidArgumentError(
                f"transaction id out of range: {self.transaction_id}"
            )
        data = self.header.encode() + self.question.encode()
        assert len(data) == REQUEST_SIZE
        return data
