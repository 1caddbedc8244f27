"""NetBIOS first-level name encoding (RFC 1001 section 14.1).

Each byte of a 16-byte label is split into two nibbles and each nibble is
added to ord('A'), so every encoded byte lies in 'A'..'P'. On the wire the
32-byte result is framed as a DNS-style label: a length byte (0x20), the
payload, then a zero byte for the empty root label.
"""

from __future__ import annotations

from nbstat.errors import InvalidArgumentError

LABEL_SIZE = 16
ENCODED_SIZE = 32
NAME_FIELD_SIZE = ENCODED_SIZE + 2

# "*" followed by NULs asks the target for its whole name table.
WILDCARD_LABEL = b"*" + b"\x00" * (LABEL_SIZE - 1)


def make_label(name: str, suffix: int = 0x00) -> bytes:
    """Build a 16-byte label: name upper-cased, space-padded to 15, plus suffix.

    >>> make_label("host", 0x00)
    b'HOST           \\x00'
    """
    raw = name.upper().encode("ascii")
    if len(raw) > LABEL_SIZE - 1:
        raise InvalidArgumentError(f"NetBIOS name too long: {name!r}")
    if not 0 <= suffix <= 0xFF:
        raise InvalidArgumentError(f"suffix out of range: {suffix:#x}")
    return raw.ljust(LABEL_SIZE - 1, b" ") + bytes([suffix])


def encode_netbios_name(label: bytes) -> bytes:
    """Half-ASCII encode a 16-byte label into 32 bytes.

    >>> encode_netbios_name(WILDCARD_LABEL)[:4]
    b'CKAA'
    """
    if len(label) != LABEL_SIZE:
        raise InvalidArgumentError(
            f"label must be {LABEL_SIZE} bytes, got {len(label)}"
        )
    out = bytearray()
    for b in label:
        out.append(0x41 + ((b >> 4) & 0x0F))
        out.append(0x41 + (b & 0x0F))
    return bytes(out)


def decode_netbios_name(encoded: bytes) -> bytes:
    """Inverse of encode_netbios_name."""
    if len(encoded) != ENCODED_SIZE:
        raise InvalidArgumentError(
            f"encoded name must be {ENCODED_SIZE} bytes, got {len(encoded)}"
        )
    out = bytearray()
    for i in range(0, ENCODED_SIZE, 2):
        hi = encoded[i] - 0x41
        lo = encoded[i + 1] - 0x41
        if not (0 <= hi <= 0x0F and 0 <= lo <= 0x0F):
            raise InvalidArgumentError(
                f"byte pair {encoded[i:i + 2]!r} at offset {i} is not half-ASCII"
            )
        out.append((hi << 4) | lo)
    return bytes(out)


def encode_name_field(label: bytes) -> bytes:
    """Encode a label and wrap it in its 34-byte wire framing."""
    return bytes([ENCODED_SIZE]) + encode_netbios_name(label) + b"\x00"
