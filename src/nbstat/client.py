"""UDP client for the NBT node status query.

Sends one NODE STATUS REQUEST to a target's name service port and waits,
for a bounded time, for exactly one response. There are no retries.

Usage:
    status = query_node_status("192.168.1.200", timeout=2000)
    for entry in status.entries:
        print(entry.name, hex(entry.suffix))
"""

from __future__ import annotations

import socket
import sys
from typing import Callable, Protocol

from nbstat.errors import (
    ErrorCode,
    FramingError,
    ProtocolError,
    QueryTimeoutError,
    TransportError,
)
from nbstat.parsers import parse_node_status_response
from nbstat.protocol import NBT_NAME_SERVICE_PORT, NodeStatusRequest
from nbstat.types import NodeStatus

DEFAULT_TIMEOUT_MS = 3000
MAX_TIMEOUT_MS = 10000

# Larger than the 576-byte ceiling so oversized replies are rejected by
# the parser rather than silently cut short by recvfrom().
RECEIVE_BUFFER_SIZE = 1024


def normalize_timeout(timeout_ms: int) -> int:
    """Clamp a timeout to (0, 10000] ms, replacing anything else with 3000."""
    if timeout_ms <= 0 or timeout_ms > MAX_TIMEOUT_MS:
        return DEFAULT_TIMEOUT_MS
    return timeout_ms


def normalize_port(port: int) -> int:
    """Return port if it is a valid UDP port, else the NBT name service port."""
    if not 0 < port <= 0xFFFF:
        return NBT_NAME_SERVICE_PORT
    return port


class Transport(Protocol):
    """What query_node_status() needs from a datagram transport."""

    def send(self, data: bytes) -> int: ...

    def receive(self, max_bytes: int, timeout_ms: int) -> tuple[bytes, tuple[str, int]]: ...

    def close(self) -> None: ...


class UDPTransport:
    """A connected IPv4 UDP socket to one target.

    Args:
        target: Hostname or dotted-quad address.
        port: Destination UDP port.

    Raises:
        TransportError: NETWORK_INIT if the target cannot be resolved,
            SOCKET if no socket could be created and connected.
    """

    def __init__(self, target: str, port: int = NBT_NAME_SERVICE_PORT) -> None:
        try:
            infos = socket.getaddrinfo(
                target, port, socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP,
            )
        except (socket.gaierror, UnicodeError) as e:
            raise TransportError(
                f"cannot resolve {target!r}: {e}", ErrorCode.NETWORK_INIT,
            ) from e

        last_error: OSError | None = None
        self._sock: socket.socket | None = None
        for family, socktype, proto, _canonname, sockaddr in infos:
            try:
                sock = socket.socket(family, socktype, proto)
            except OSError as e:
                raise TransportError(f"cannot create socket: {e}") from e
            try:
                sock.connect(sockaddr)
            except OSError as e:
                sock.close()
                last_error = e
                continue
            self._sock = sock
            self.address: tuple[str, int] = sockaddr[:2]
            break

        if self._sock is None:
            raise TransportError(f"cannot connect to {target}:{port}: {last_error}")

    def send(self, data: bytes) -> int:
        sock = self._socket()
        try:
            return sock.send(data)
        except OSError as e:
            raise TransportError(f"send failed: {e}") from e

    def receive(self, max_bytes: int, timeout_ms: int) -> tuple[bytes, tuple[str, int]]:
        """Wait up to timeout_ms for one datagram.

        Raises:
            QueryTimeoutError: If nothing arrives in time.
            TransportError: On any other socket error (e.g. ICMP port
                unreachable reported as ConnectionRefusedError).
        """
        sock = self._socket()
        sock.settimeout(timeout_ms / 1000)
        try:
            data, addr = sock.recvfrom(max_bytes)
        except TimeoutError as e:
            raise QueryTimeoutError(f"no response within {timeout_ms} ms") from e
        except OSError as e:
            raise TransportError(f"receive failed: {e}") from e
        return data, addr[:2]

    def _socket(self) -> socket.socket:
        if self._sock is None:
            raise TransportError("transport is closed")
        return self._sock

    def close(self) -> None:
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def __enter__(self) -> UDPTransport:
        return self

    def __exit__(self, *_exc) -> None:
        self.close()


def query_node_status(
    target: str,
    port: int = NBT_NAME_SERVICE_PORT,
    timeout: int = DEFAULT_TIMEOUT_MS,
    transaction_id: int | None = None,
    transport_factory: Callable[[str, int], Transport] = UDPTransport,
    verbose: bool = False,
) -> NodeStatus:
    """Retrieve a target's NetBIOS name table and MAC address.

    Args:
        target: Hostname or IPv4 address to query.
        port: UDP port (normalised to 137 when out of range).
        timeout: Milliseconds to wait (normalised to 3000 when out of range).
        transaction_id: 16-bit request id (default: derived from the pid).
        transport_factory: Called as factory(target, port) to get a transport.
        verbose: Print progress to stderr.

    Returns:
        NodeStatus for the responding host.

    Raises:
        TransportError: Socket setup or I/O failed.
        QueryTimeoutError: No response within the timeout.
        ProtocolError: The response is malformed or answers another request.
        FramingError: A short send or an internal decoder inconsistency.
    """
    port = normalize_port(port)
    timeout = normalize_timeout(timeout)

    request = NodeStatusRequest() if transaction_id is None else NodeStatusRequest(transaction_id)
    data = request.encode()

    transport = transport_factory(target, port)
    try:
        if verbose:
            print(f"Sending node status request to {target}:{port} "
                  f"(id 0x{request.transaction_id:04X})", file=sys.stderr)
        sent = transport.send(data)
        if sent != len(data):
            raise FramingError(f"short send: {sent} of {len(data)} bytes")
        payload, address = transport.receive(RECEIVE_BUFFER_SIZE, timeout)
    finally:
        transport.close()

    if verbose:
        print(f"Received {len(payload)} bytes from {address[0]}:{address[1]}", file=sys.stderr)

    response = parse_node_status_response(payload)
    if response.header.transaction_id != request.transaction_id:
        msg = (
            f"Transaction id 0x{response.header.transaction_id:04X} does not "
            f"match request 0x{request.transaction_id:04X}"
        )
        raise ProtocolError(msg)

    return response.to_node_status(address)
