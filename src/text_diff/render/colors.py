"""Color collaborators for ``ColoredUnifiedFormat``."""

from __future__ import annotations

from typing import Protocol

# Foreground SGR codes, named like terminal palette entries.
ANSI_CODES: dict[str, str] = {
    "black": "30",
    "red": "31",
    "green": "32",
    "brown": "33",
    "blue": "34",
    "magenta": "35",
    "cyan": "36",
    "lightgray": "37",
    "gray": "90",
    "lightred": "91",
    "lightgreen": "92",
    "yellow": "93",
    "lightblue": "94",
    "lightmagenta": "95",
    "lightcyan": "96",
    "white": "97",
}

RESET = "\x1b[0m"


class Colorizer(Protocol):
    """Wraps text in a named color."""

    def color(self, name: str, text: str) -> str:
        ...  # pragma: no cover


class AnsiColorizer:
    """Color text with ANSI escape sequences.

    Trailing newlines stay outside the colored span so that the reset code
    never bleeds into the next line.
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled

    def color(self, name: str, text: str) -> str:
        code = ANSI_CODES.get(name)
        if code is None:
            raise ValueError(
                f"Unknown color '{name}'. Valid colors: {sorted(ANSI_CODES)}"
            )
        if not self.enabled or not text:
            return text
        body = text.rstrip("\n")
        tail = text[len(body) :]
        return f"\x1b[{code}m{body}{RESET}{tail}"
