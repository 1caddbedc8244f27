"""Node status response parser.

Decodes an untrusted NODE STATUS RESPONSE datagram into typed objects.
Every structural problem raises ProtocolError; no partially decoded
result ever escapes.

Response layout (RFC 1002 section 4.2.18)::

    header              12 bytes
    RR name             34 bytes  (skipped, not compared with the question)
    RR type/class/ttl   8 bytes   (type must be NBSTAT)
    RDLENGTH            2 bytes
    NUM_NAMES           1 byte
    NODE_NAME entries   18 bytes each
    STATISTICS          46 bytes

The length of the datagram must match NUM_NAMES exactly. That single
check runs before the entry loop so the loop can never overrun.
"""

from __future__ import annotations

from dataclasses import dataclass

from nbstat.codec import Cursor
from nbstat.errors import FramingError, ProtocolError
from nbstat.protocol import Header, ResourceRecord, RRType
from nbstat.types import (
    ENTRY_SIZE,
    NAME_SIZE,
    STATISTICS_SIZE,
    NameEntry,
    NodeStatus,
    Statistics,
)

# Largest datagram a node status responder is assumed to send.
MAX_DATAGRAM_SIZE = 576


@dataclass(frozen=True)
class NodeStatusResponse:
    """A fully decoded node status response."""

    header: Header
    record: ResourceRecord
    entries: tuple[NameEntry, ...]
    statistics: Statistics

    def to_node_status(self, address: tuple[str, int]) -> NodeStatus:
        return NodeStatus(
            address=address,
            hwaddr=self.statistics.unit_id,
            entries=self.entries,
            statistics=self.statistics,
        )


def parse_name_entry(cursor: Cursor) -> NameEntry:
    """Read one 18-byte NODE_NAME entry."""
    name = cursor.take(NAME_SIZE)
    suffix = cursor.u8()
    flags = cursor.u16()
    return NameEntry(name=name, suffix=suffix, flags=flags)


def parse_statistics(cursor: Cursor) -> Statistics:
    """Read the 46-byte statistics block field by field."""
    return Statistics(
        unit_id=cursor.take(6),
        jumpers=cursor.u8(),
        test_result=cursor.u8(),
        version_number=cursor.u16(),
        period_of_statistics=cursor.u16(),
        number_of_crcs=cursor.u16(),
        number_alignment_errors=cursor.u16(),
        number_of_collisions=cursor.u16(),
        number_send_aborts=cursor.u16(),
        number_good_sends=cursor.u32(),
        number_good_receives=cursor.u32(),
        number_retransmits=cursor.u16(),
        number_no_resource_conditions=cursor.u16(),
        number_free_command_blocks=cursor.u16(),
        total_number_command_blocks=cursor.u16(),
        max_total_number_command_blocks=cursor.u16(),
        number_pending_sessions=cursor.u16(),
        max_number_pending_sessions=cursor.u16(),
        max_total_sessions_possible=cursor.u16(),
        session_data_packet_size=cursor.u16(),
    )


def parse_node_status_response(data: bytes) -> NodeStatusResponse:
    """Decode and validate a node status response datagram.

    Args:
        data: The raw UDP payload as received.

    Returns:
        NodeStatusResponse with the name table in wire order.

    Raises:
        ProtocolError: If the datagram is oversized, too short, not a
            response, not an NBSTAT record, or its length disagrees with
            its name count.
        FramingError: If decoding ends anywhere but the last byte.
    """
    if len(data) > MAX_DATAGRAM_SIZE:
        msg = f"Datagram too large: {len(data)} bytes (limit {MAX_DATAGRAM_SIZE})"
        raise ProtocolError(msg)

    cursor = Cursor(data)
    header = Header.decode(cursor)
    if not header.response:
        msg = f"Response bit not set in flags 0x{header.flags:04X}"
        raise ProtocolError(msg)

    record = ResourceRecord.decode(cursor)
    if record.rr_type != RRType.NBSTAT:
        msg = f"Unexpected resource record type 0x{record.rr_type:04X} (expected 0x{RRType.NBSTAT:04X})"
        raise ProtocolError(msg)

    num_names = cursor.u8()
    expected = cursor.position + ENTRY_SIZE * num_names + STATISTICS_SIZE
    if expected != len(data):
        msg = f"Datagram is {len(data)} bytes but {num_names} names require {expected}"
        raise ProtocolError(msg)

    entries = [parse_name_entry(cursor) for _ in range(num_names)]
    statistics = parse_statistics(cursor)

    if cursor.remaining != 0:
        msg = f"Decoder stopped at offset {cursor.position} of {len(data)}"
        raise FramingError(msg)

    return NodeStatusResponse(
        header=header,
        record=record,
        entries=tuple(entries),
        statistics=statistics,
    )
