"""CLI entry point for nbstat.

    nbstat [-p port] [-t timeout] target

Queries the target's NetBIOS name table with a node status request and
prints it together with the adapter MAC address.
"""

from __future__ import annotations

import argparse
import sys
import tomllib

from nbstat.errors import ErrorCode, NBStatError, describe
from nbstat.utils.terminal import RED, colorize, use_color

PROG = "nbstat"


class _OnceAction(argparse.Action):
    """Store an option value, refusing a second occurrence."""

    def __call__(self, parser, namespace, values, option_string=None):
        if getattr(namespace, self.dest) is not None:
            parser.error(f"incorrect number of arguments for option {option_string}")
        setattr(namespace, self.dest, values)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        usage="%(prog)s [-p port] [-t timeout] target",
        description="Query a host's NetBIOS name table (NBT node status).",
        epilog=f"Example: {PROG} -p 137 -t 3000 192.168.1.200",
    )
    parser.add_argument(
        "-p", dest="port", type=int, action=_OnceAction, default=None,
        help="UDP port (default: 137)",
    )
    parser.add_argument(
        "-t", dest="timeout", type=int, action=_OnceAction, default=None,
        help="Timeout in milliseconds, 1-10000 (default: 3000)",
    )
    parser.add_argument("target", help="Hostname or IPv4 address to query")
    return parser


def _report_error(code: int, detail: str = "", verbose: bool = False) -> None:
    """Print the one-line failure diagnostic to stderr."""
    line = f"-{PROG}: error! {describe(code)} (0x{code:04X})"
    print(colorize(line, RED, use_color(sys.stderr)), file=sys.stderr)
    if verbose and detail:
        print(f"  {detail}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = _build_parser().parse_args(argv)

    from nbstat.client import normalize_port, normalize_timeout, query_node_status
    from nbstat.config import load_config
    from nbstat.display import render

    try:
        config = load_config()
    except (OSError, tomllib.TOMLDecodeError, ValueError) as e:
        print(f"Error: cannot load configuration: {e}", file=sys.stderr)
        return 1

    port = normalize_port(args.port if args.port is not None else config.query.port)
    timeout = normalize_timeout(args.timeout if args.timeout is not None else config.query.timeout)
    verbose = config.display.verbose

    try:
        status = query_node_status(args.target, port=port, timeout=timeout, verbose=verbose)
    except NBStatError as e:
        _report_error(e.code, str(e), verbose)
        return 1
    except MemoryError:
        _report_error(ErrorCode.NO_MEMORY)
        return 1

    print(render(status, config.display.format))
    return 0


if __name__ == "__main__":
    sys.exit(main())
