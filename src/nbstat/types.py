"""Data types for decoded node status responses.

These frozen dataclasses hold what a NODE STATUS RESPONSE reports about
the target: its NetBIOS name table and the adapter statistics block.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

ENTRY_SIZE = 18
NAME_SIZE = 15
STATISTICS_SIZE = 46


class NodeType(IntEnum):
    """Owner node type (ONT) from the entry flags word."""

    B = 0b00
    P = 0b01
    M = 0b10
    H = 0b11  # reserved in RFC 1002, used by Microsoft for hybrid nodes


@dataclass(frozen=True)
class NameEntry:
    """One registered name from the target's name table.

    Attributes:
        name: 15 raw name bytes, space padded, as sent by the target.
        suffix: Service type byte (0x00 workstation, 0x20 server, ...).
        flags: The raw 16-bit NAME_FLAGS word. The accessors below split it.
    """

    name: bytes
    suffix: int
    flags: int = 0

    @property
    def group(self) -> bool:
        return bool((self.flags >> 15) & 0x1)

    @property
    def node_type(self) -> NodeType:
        return NodeType((self.flags >> 13) & 0x3)

    @property
    def deregistering(self) -> bool:
        return bool((self.flags >> 12) & 0x1)

    @property
    def conflict(self) -> bool:
        return bool((self.flags >> 11) & 0x1)

    @property
    def active(self) -> bool:
        return bool((self.flags >> 10) & 0x1)

    @property
    def permanent(self) -> bool:
        return bool((self.flags >> 9) & 0x1)

    @property
    def reserved(self) -> int:
        """Low 9 bits. Should be zero; kept as sent."""
        return self.flags & 0x1FF


@dataclass(frozen=True)
class Statistics:
    """The 46-byte statistics block that closes a node status response.

    Modern stacks leave everything but unit_id (the adapter MAC) zero.
    """

    unit_id: bytes
    jumpers: int = 0
    test_result: int = 0
    version_number: int = 0
    period_of_statistics: int = 0
    number_of_crcs: int = 0
    number_alignment_errors: int = 0
    number_of_collisions: int = 0
    number_send_aborts: int = 0
    number_good_sends: int = 0
    number_good_receives: int = 0
    number_retransmits: int = 0
    number_no_resource_conditions: int = 0
    number_free_command_blocks: int = 0
    total_number_command_blocks: int = 0
    max_total_number_command_blocks: int = 0
    number_pending_sessions: int = 0
    max_number_pending_sessions: int = 0
    max_total_sessions_possible: int = 0
    session_data_packet_size: int = 0


@dataclass(frozen=True)
class NodeStatus:
    """Result of a successful node status query.

    Attributes:
        address: (host, port) the response came from.
        hwaddr: 6-byte hardware address copied from the statistics unit id.
        entries: Name table in wire order.
        statistics: The full statistics block.
    """

    address: tuple[str, int]
    hwaddr: bytes
    entries: tuple[NameEntry, ...] = ()
    statistics: Statistics | None = None

    @property
    def count(self) -> int:
        return len(self.entries)
