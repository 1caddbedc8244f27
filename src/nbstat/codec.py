"""Big-endian integer codec and a bounds-checked read cursor.

All NBT integers travel in network byte order. The encode/decode helpers
operate on a raw buffer at a given offset and perform no bounds checking
of their own; callers that walk an untrusted datagram should go through
Cursor, which fails closed instead of reading past the end.
"""

from __future__ import annotations

import struct

from nbstat.errors import ProtocolError

_U8 = struct.Struct(">B")
_U16 = struct.Struct(">H")
_U32 = struct.Struct(">I")


def decode8(buf: bytes, offset: int = 0) -> int:
    return _U8.unpack_from(buf, offset)[0]


def decode16(buf: bytes, offset: int = 0) -> int:
    return _U16.unpack_from(buf, offset)[0]


def decode32(buf: bytes, offset: int = 0) -> int:
    return _U32.unpack_from(buf, offset)[0]


def encode8(buf: bytearray, value: int, offset: int = 0) -> None:
    _U8.pack_into(buf, offset, value & 0xFF)


def encode16(buf: bytearray, value: int, offset: int = 0) -> None:
    _U16.pack_into(buf, offset, value & 0xFFFF)


def encode32(buf: bytearray, value: int, offset: int = 0) -> None:
    _U32.pack_into(buf, offset, value & 0xFFFFFFFF)


class Cursor:
    """Sequential reader over an immutable byte buffer.

    Every read advances the position. A read that would run past the end
    of the buffer raises ProtocolError and leaves the position unchanged.

    >>> c = Cursor(b"\\x00\\x21\\x01")
    >>> c.u16(), c.u8(), c.remaining
    (33, 1, 0)
    """

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def _advance(self, n: int) -> int:
        if n < 0 or n > self.remaining:
            msg = (
                f"need {n} bytes at offset {self._pos}, "
                f"only {self.remaining} available"
            )
            raise ProtocolError(msg)
        start = self._pos
        self._pos += n
        return start

    def skip(self, n: int) -> None:
        self._advance(n)

    def take(self, n: int) -> bytes:
        start = self._advance(n)
        return self._data[start:start + n]

    def u8(self) -> int:
        return decode8(self._data, self._advance(1))

    def u16(self) -> int:
        return decode16(self._data, self._advance(2))

    def u32(self) -> int:
        return decode32(self._data, self._advance(4))
