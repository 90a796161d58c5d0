"""Terminal styling with ANSI escape sequences that can be switched off."""

from __future__ import annotations

import enum
import os
import re
import sys

_RESET = "\x1b[0m"
_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")

_override: bool | None = None


class Color(enum.Enum):
    """Text attributes and foreground colours with their SGR codes."""

    BOLD = "1"
    DIMMED = "2"
    ITALIC = "3"
    RED = "31"
    GREEN = "32"
    YELLOW = "33"
    BLUE = "34"
    MAGENTA = "35"
    CYAN = "36"
    WHITE = "37"
    BRIGHT_CYAN = "96"


def set_color_enabled(enabled: bool | None) -> None:
    """Force colours on or off; ``None`` restores automatic detection."""
    global _override
    _override = None if enabled is None else bool(enabled)


def color_enabled() -> bool:
    """Return whether styled output should carry escape sequences."""
    if _override is not None:
        return _override
    if os.environ.get("NO_COLOR"):
        return False
    force = os.environ.get("CLICOLOR_FORCE")
    if force and force != "0":
        return True
    if os.environ.get("CLICOLOR") == "0":
        return False
    stream = sys.stdout
    return bool(stream is not None and hasattr(stream, "isatty") and stream.isatty())


def _wrap(text: str, codes: str) -> str:
    return f"\x1b[{codes}m{text}{_RESET}"


def paint(text: str, *args: Color) -> str:
    """Apply the given styles to ``text`` when colours are enabled."""
    text = str(text)
    if not args or not color_enabled():
        return text
    return _wrap(text, ";".join(style.value for style in args))


def truecolor(text: str, r: int, g: int, b: int) -> str:
    """Colour ``text`` with a 24-bit foreground colour when colours are enabled."""
    text = str(text)
    for channel in (r, g, b):
        if not 0 <= int(channel) <= 255:
            raise ValueError(f"colour channel out of range: {channel}")
    if not color_enabled():
        return text
    return _wrap(text, f"38;2;{int(r)};{int(g)};{int(b)}")


def strip_ansi(text: str) -> str:
    """Remove ANSI SGR escape sequences from ``text``."""
    return _ANSI_RE.sub("", text)