"""Text rendering of node status results.

Two layouts are supported: the Windows ``nbtstat -A`` remote machine
table and the Samba ``nmblookup -A`` listing. Both end with the target's
MAC address.
"""

from __future__ import annotations

import jinja2

from nbstat.types import NAME_SIZE, NameEntry, NodeStatus

FORMATS = ("nbtstat", "nmblookup")

# (suffix, group) -> description. Anything missing renders as "Unknown".
SERVICE_NAMES: dict[tuple[int, bool], str] = {
    (0x00, False): "Workstation Service",
    (0x00, True): "Browser Client",
    (0x01, True): "Master Browser",
    (0x03, False): "Messenger Service",
    (0x1B, False): "Domain Master Browser",
    (0x1C, True): "Domain Controllers",
    (0x1D, False): "Master Browser",
    (0x1E, True): "Browser Service Elections",
    (0x1F, False): "NetDDE Service",
    (0x20, False): "Default Name",
}

_NBTSTAT_TEMPLATE = jinja2.Template("""\

    NetBIOS Remote Machine Table

       Name             Type   Status     Description
    ----------------------------------------------
{% for row in rows %}
    {{ row.name }}<{{ "%02X"|format(row.suffix) }}> {{ "GROUP " if row.group else "UNIQUE" }} Registered {{ row.service }}
{% endfor %}

    MAC Address = {{ mac }}
""", trim_blocks=True)

_NMBLOOKUP_TEMPLATE = jinja2.Template("""\
Looking up status of {{ address }}
{% for row in rows %}
\t{{ row.name }} <{{ "%02x"|format(row.suffix) }}> - {{ "<GROUP>" if row.group else "       " }} {{ row.node_type }} {{ row.states|join(" ") }}
{% endfor %}

\tMAC Address = {{ mac }}
""", trim_blocks=True)


def service_name(suffix: int, group: bool) -> str:
    return SERVICE_NAMES.get((suffix, group), "Unknown")


def printable_name(raw: bytes) -> str:
    """Render a raw 15-byte name, replacing non-printable bytes with '.'."""
    text = "".join(chr(b) if 0x20 <= b <= 0x7E else "." for b in raw[:NAME_SIZE])
    return text.ljust(NAME_SIZE)


def format_hwaddr(hwaddr: bytes, sep: str = "-") -> str:
    """Format a hardware address as upper-case hex octets.

    >>> format_hwaddr(bytes.fromhex("aabbccddeeff"))
    'AA-BB-CC-DD-EE-FF'
    """
    if sep not in ("-", ":"):
        raise ValueError(f"separator must be '-' or ':', got {sep!r}")
    return sep.join(f"{b:02X}" for b in hwaddr)


def _entry_states(entry: NameEntry) -> list[str]:
    states = []
    if entry.active:
        states.append("<ACTIVE>")
    if entry.deregistering:
        states.append("<DEREGISTERING>")
    if entry.conflict:
        states.append("<CONFLICT>")
    if entry.permanent:
        states.append("<PERMANENT>")
    return states


def _rows(status: NodeStatus) -> list[dict]:
    return [
        {
            "name": printable_name(entry.name),
            "suffix": entry.suffix,
            "group": entry.group,
            "service": service_name(entry.suffix, entry.group),
            "node_type": entry.node_type.name,
            "states": _entry_states(entry),
        }
        for entry in status.entries
    ]


def render_nbtstat(status: NodeStatus) -> str:
    return _NBTSTAT_TEMPLATE.render(
        rows=_rows(status),
        mac=format_hwaddr(status.hwaddr),
    )


def render_nmblookup(status: NodeStatus) -> str:
    return _NMBLOOKUP_TEMPLATE.render(
        address=status.address[0],
        rows=_rows(status),
        mac=format_hwaddr(status.hwaddr),
    )


def render(status: NodeStatus, fmt: str = "nbtstat") -> str:
    """Render a node status result in the named format."""
    if fmt == "nbtstat":
        return render_nbtstat(status)
    if fmt == "nmblookup":
        return render_nmblookup(status)
    raise ValueError(f"unknown output format {fmt!r} (expected one of {', '.join(FORMATS)})")
