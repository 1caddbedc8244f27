"""Terminal color utilities.

ANSI color for CLI diagnostics, honouring TTY detection and NO_COLOR.
"""

from __future__ import annotations

import os
import sys
from typing import TextIO

RED = "31"
BOLD = "1"


def use_color(stream: TextIO = sys.stderr) -> bool:
    """True if the stream is an interactive terminal and NO_COLOR is unset or empty."""
    if os.environ.get("NO_COLOR"):
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def colorize(text: str, code: str, enabled: bool) -> str:
    if not enabled:
        return text
    return f"\033[{code}m{text}\033[0m"
