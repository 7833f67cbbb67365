"""Helpers for turning text into line sequences and back.

Engines compare lines exactly as given.  ``split_lines`` drops line
terminators by default so that ``"a\\n"`` and a final ``"a"`` without a
newline compare equal; pass ``keepends=True`` to preserve them for an exact
byte-for-byte reconstruction.
"""

from __future__ import annotations

from collections.abc import Iterable


def split_lines(text: str, keepends: bool = False) -> list[str]:
    """Split *text* into lines on ``\\n``, ``\\r\\n`` and ``\\r``."""
    if not text:
        return []
    if keepends:
        return text.splitlines(True)
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    lines = normalized.split("\n")
    if normalized.endswith("\n"):
        lines.pop()
    return lines


def trim_newlines(lines: Iterable[str]) -> list[str]:
    """Remove every ``\\n`` and ``\\r`` from each line."""
    return [line.replace("\n", "").replace("\r", "") for line in lines]


def join_lines(lines: Iterable[str], terminator: str = "\n") -> str:
    """Join lines with *terminator*, terminating the last line as well."""
    return "".join(f"{line}{terminator}" for line in lines)
