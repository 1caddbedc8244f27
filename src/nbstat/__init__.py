"""NBT node status query: a pure-Python RFC 1001/1002 implementation.

Retrieves a remote host's NetBIOS name table and adapter MAC address
with a single UDP NODE STATUS request on port 137.

Quick start:
    from nbstat import query_node_status

    status = query_node_status("192.168.1.200")
    for entry in status.entries:
        print(entry.name, f"<{entry.suffix:02X}>")
"""

from nbstat.client import (
    UDPTransport,
    normalize_port,
    normalize_timeout,
    query_node_status,
)
from nbstat.errors import (
    ErrorCode,
    FramingError,
    InvalidArgumentError,
    NBStatError,
    ProtocolError,
    QueryTimeoutError,
    TransportError,
    describe,
)
from nbstat.names import WILDCARD_LABEL, encode_netbios_name
from nbstat.parsers import NodeStatusResponse, parse_node_status_response
from nbstat.protocol import Header, NodeStatusRequest, Opcode, RRType
from nbstat.types import NameEntry, NodeStatus, NodeType, Statistics

__version__ = "0.1.0"

__all__ = [
    "ErrorCode",
    "FramingError",
    "Header",
    "InvalidArgumentError",
    "NameEntry",
    "NBStatError",
    "NodeStatus",
    "NodeStatusRequest",
    "NodeStatusResponse",
    "NodeType",
    "Opcode",
    "ProtocolError",
    "QueryTimeoutError",
    "RRType",
    "Statistics",
    "TransportError",
    "UDPTransport",
    "WILDCARD_LABEL",
    "describe",
    "encode_netbios_name",
    "normalize_port",
    "normalize_timeout",
    "parse_node_status_response",
    "query_node_status",
]
