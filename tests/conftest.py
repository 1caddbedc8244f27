"""Shared test fixtures for nbstat."""

import struct

import pytest

from nbstat.names import WILDCARD_LABEL, encode_name_field
from nbstat.protocol import Header, ResourceRecord

STATISTICS_FORMAT = ">6sBBHHHHHHIIHHHHHHHHH"
DEFAULT_UNIT_ID = bytes.fromhex("aabbccddeeff")


def pack_entry(name, suffix, flags=0x0400):
    """Pack one 18-byte name table entry. Names are space padded to 15."""
    if isinstance(name, str):
        name = name.encode("ascii")
    return name.ljust(15, b" ")[:15] + struct.pack(">BH", suffix, flags)


def pack_statistics(unit_id=DEFAULT_UNIT_ID, counters=None):
    """Pack a 46-byte statistics block. counters: the 19 fields after unit_id."""
    if counters is None:
        counters = [0] * 19
    return struct.pack(STATISTICS_FORMAT, unit_id, *counters)


def build_response(
    entries=(),
    unit_id=DEFAULT_UNIT_ID,
    transaction_id=0x1234,
    flags=0x8400,
    rr_type=0x0021,
    num_names=None,
    trailing=b"",
):
    """Build a node status response datagram.

    entries is a sequence of (name, suffix) or (name, suffix, flags).
    num_names overrides the count byte to fabricate inconsistent packets.
    """
    packed = b"".join(pack_entry(*e) for e in entries)
    count = len(entries) if num_names is None else num_names
    rdata = bytes([count]) + packed + pack_statistics(unit_id)
    header = Header.from_flags(transaction_id, flags, ancount=1)
    record = ResourceRecord(
        name=encode_name_field(WILDCARD_LABEL),
        rr_type=rr_type,
        rr_class=0x0001,
        ttl=0,
        rdlength=len(rdata),
    )
    return header.encode() + record.encode() + rdata + trailing


@pytest.fixture
def make_response():
    """Return the response datagram builder."""
    return build_response


@pytest.fixture
def two_entry_response():
    """A response from a workstation that is also a file server."""
    return build_response(
        entries=[("WORKSTATION", 0x00), ("FILESERVER", 0x20)],
    )
