"""Error codes and exceptions for node status queries.

Each failure kind has a stable numeric code (reported by the CLI as
``(0x0105)`` and so on) and a one-line description. Library functions
raise the exception classes below; only the command line turns them
into exit statuses.
"""

from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    """Numeric failure codes."""

    OK = 0x000
    NO_MEMORY = 0x101
    INVALID_ARGUMENT = 0x102
    NETWORK_INIT = 0x103
    SOCKET = 0x104
    PROTOCOL = 0x105
    TRUNCATED = 0x106
    TIMEOUT = 0x107
    DEBUG = 0x200


_DESCRIPTIONS: dict[ErrorCode, str] = {
    ErrorCode.OK: "operation completed successfully",
    ErrorCode.NO_MEMORY: "memory allocation failure",
    ErrorCode.INVALID_ARGUMENT: "an invalid argument was passed to a library function",
    ErrorCode.NETWORK_INIT: "could not resolve or initialize the network target",
    ErrorCode.SOCKET: "the system could not allocate a socket descriptor",
    ErrorCode.PROTOCOL: "malformed or unexpected node status response",
    ErrorCode.TRUNCATED: "truncation flag was set in response",
    ErrorCode.TIMEOUT: "request expired",
    ErrorCode.DEBUG: "debugging error",
}

UNKNOWN_ERROR = "Unknown error"


def describe(code: int) -> str:
    """Return the description for an error code.

    >>> describe(0x107)
    'request expired'
    >>> describe(0x999)
    'Unknown error'
    """
    try:
        return _DESCRIPTIONS[ErrorCode(code)]
    except ValueError:
        return UNKNOWN_ERROR


class NBStatError(Exception):
    """Base class for every node status failure."""

    code: ErrorCode = ErrorCode.DEBUG

    @property
    def description(self) -> str:
        return describe(self.code)


class InvalidArgumentError(NBStatError, ValueError):
    """Malformed input handed to an encode or decode call."""

    code = ErrorCode.INVALID_ARGUMENT


class TransportError(NBStatError, OSError):
    """The socket could not be set up or used.

    Carries NETWORK_INIT when the target cannot be resolved and SOCKET
    for every other socket failure.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.SOCKET) -> None:
        super().__init__(message)
        self.code = code

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class ProtocolError(NBStatError, ValueError):
    """The response datagram violates the node status wire format."""

    code = ErrorCode.PROTOCOL


class QueryTimeoutError(NBStatError, TimeoutError):
    """No response arrived within the timeout window."""

    code = ErrorCode.TIMEOUT


class FramingError(NBStatError):
    """The decoder finished at the wrong offset (an internal bug)."""

    code = ErrorCode.DEBUG
