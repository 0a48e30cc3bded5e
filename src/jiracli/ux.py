"""Terminal output helpers for jiracli - colours, notices and plain tables."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping, Sequence
from typing import Any, TextIO


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"


# Borderless table style shared by every listing command.
TABLE_CHARS: Mapping[str, str] = {
    "top": " ",
    "top-mid": "",
    "top-left": "",
    "top-right": "",
    "bottom": " ",
    "bottom-mid": "",
    "bottom-left": "",
    "bottom-right": "",
    "left": " ",
    "left-mid": "",
    "mid": "",
    "mid-mid": "",
    "right": "",
    "right-mid": "",
    "middle": " ",
}


def _supports_color(stream: TextIO | None = None) -> bool:
    stream = stream or sys.stdout
    if os.environ.get("NO_COLOR"):
        return False
    if not hasattr(stream, "isatty") or not stream.isatty():
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return True


def colorize(text: str, color: str, bold: bool = False, stream: TextIO | None = None) -> str:
    """Apply color to text if terminal supports it."""
    if not _supports_color(stream):
        return text
    prefix = (Colors.BOLD if bold else "") + color
    return f"{prefix}{text}{Colors.RESET}"


def _padded(message: str, stream: TextIO) -> None:
    print("", file=stream)
    print(message, file=stream)
    print("", file=stream)


def print_success(message: str, stream: TextIO | None = None) -> None:
    """Print a blank-line padded success notice in green."""
    stream = stream or sys.stdout
    _padded(colorize(f"  {message}", Colors.GREEN, stream=stream), stream)


def print_error(message: str, stream: TextIO | None = None) -> None:
    """Print a blank-line padded error notice in red (stderr by default)."""
    stream = stream or sys.stderr
    _padded(colorize(f"  {message}", Colors.RED, stream=stream), stream)


def print_value(label: str, value: Any, color: str = Colors.BLUE, stream: TextIO | None = None) -> None:
    """Print ``label`` followed by a highlighted value, e.g. ``Current host: x``."""
    stream = stream or sys.stdout
    _padded(f"  {label}: " + colorize(str(value), color, bold=True, stream=stream), stream)


def render_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[Any]],
    *,
    chars: Mapping[str, str] = TABLE_CHARS,
) -> str:
    """Render ``rows`` as a fixed-width text table.

    Only the characters used by the borderless style are honoured: ``left``
    prefixes each line, ``middle`` separates cells, ``top``/``bottom`` produce
    padding lines when non-empty.
    """
    cells = [[str(c) if c is not None else "" for c in row] for row in rows]
    widths = [len(h) for h in headers]
    for row in cells:
        for idx, value in enumerate(row[: len(widths)]):
            widths[idx] = max(widths[idx], len(value))

    left = chars.get("left", "")
    middle = chars.get("middle", " ")
    sep = f"{middle} "

    def _line(values: Sequence[str]) -> str:
        padded = [v.ljust(widths[i]) for i, v in enumerate(values[: len(widths)])]
        return (left + sep.join(padded)).rstrip()

    lines: list[str] = []
    if chars.get("top"):
        lines.append("")
    lines.append(_line(list(headers)))
    lines.append(left + sep.join("-" * w for w in widths))
    lines.extend(_line(row) for row in cells)
    if chars.get("bottom"):
        lines.append("")
    return "\n".join(lines)


def print_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[Any]],
    *,
    chars: Mapping[str, str] = TABLE_CHARS,
    stream: TextIO | None = None,
) -> None:
    stream = stream or sys.stdout
    print(render_table(headers, rows, chars=chars), file=stream)
