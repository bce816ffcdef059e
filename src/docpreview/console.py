"""Console output — coloured progress messages on stderr.

Progress lines use the ``  |>`` prefix.  Detects ``NO_COLOR`` / ``TERM`` for
safe fallback.
"""

from __future__ import annotations

import os
import sys


# ---------------------------------------------------------------------------
# ANSI helpers — respect NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


COLOR = _supports_color()

RESET = "\033[0m" if COLOR else ""
BOLD = "\033[1m" if COLOR else ""
DIM = "\033[2m" if COLOR else ""
UNDERLINE = "\033[4m" if COLOR else ""
RED = "\033[31m" if COLOR else ""
GREEN = "\033[32m" if COLOR else ""
YELLOW = "\033[33m" if COLOR else ""
BLUE = "\033[34m" if COLOR else ""
MAGENTA = "\033[35m" if COLOR else ""
CYAN = "\033[36m" if COLOR else ""

PROGRESS = "  |>"


def _emit(*parts: object) -> None:
    print(*parts, file=sys.stderr)


def info(*parts: object) -> None:
    """Print an informational message."""
    _emit(*parts)


def progress(*parts: object) -> None:
    """Print a ``  |>`` progress line."""
    _emit(PROGRESS, *parts)


def warning(*parts: object) -> None:
    """Print a warning in yellow."""
    _emit(YELLOW + " ".join(str(p) for p in parts) + RESET)


def error(*parts: object) -> None:
    """Print an error in red."""
    _emit(RED + " ".join(str(p) for p in parts) + RESET)
