"""Load query and display defaults from nbstat.toml."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from nbstat.client import DEFAULT_TIMEOUT_MS, normalize_port, normalize_timeout
from nbstat.display import FORMATS
from nbstat.protocol import NBT_NAME_SERVICE_PORT

CONFIG_ENV_VAR = "NBSTAT_CONFIG"
DEFAULT_CONFIG_PATH = Path("nbstat.toml")


@dataclass
class QueryConfig:
    """Defaults for the node status query itself.

    Out-of-range values are normalised rather than rejected, matching the
    command-line options.
    """

    port: int = NBT_NAME_SERVICE_PORT
    timeout: int = DEFAULT_TIMEOUT_MS


@dataclass
class DisplayConfig:
    """How results and progress are reported."""

    format: str = "nbtstat"
    verbose: bool = False


@dataclass
class NBStatConfig:
    query: QueryConfig = field(default_factory=QueryConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)


def _build_query(data: dict) -> QueryConfig:
    section = data.get("query", {})
    return QueryConfig(
        port=normalize_port(int(section.get("port", NBT_NAME_SERVICE_PORT))),
        timeout=normalize_timeout(int(section.get("timeout", DEFAULT_TIMEOUT_MS))),
    )


def _build_display(data: dict) -> DisplayConfig:
    section = data.get("display", {})
    fmt = section.get("format", "nbtstat")
    if fmt not in FORMATS:
        raise ValueError(f"display.format must be one of {', '.join(FORMATS)}, got {fmt!r}")
    return DisplayConfig(format=fmt, verbose=bool(section.get("verbose", False)))


def load_config(config_path: Path | str | None = None) -> NBStatConfig:
    """Load configuration from a TOML file.

    If config_path is None, uses $NBSTAT_CONFIG when set, otherwise
    ./nbstat.toml. A missing default file gives the built-in defaults;
    a missing file that was named explicitly raises FileNotFoundError.
    """
    if config_path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            config_path = Path(env_path)
        elif DEFAULT_CONFIG_PATH.exists():
            config_path = DEFAULT_CONFIG_PATH
        else:
            return NBStatConfig()
    else:
        config_path = Path(config_path)

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    return NBStatConfig(
        query=_build_query(data),
        display=_build_display(data),
    )
