"""Line-oriented output formats: normal, unified, context and colored unified."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from text_diff.diff.ops import Add, Change, Copy, Delete
from text_diff.errors import ConfigurationError
from text_diff.render.base import DiffFormat, Hunk
from text_diff.render.colors import Colorizer


def _unified_range(start: int, length: int) -> str:
    # An empty side names the line *before* the hunk (GNU convention).
    if length == 0:
        return f"{start - 1},0"
    if length == 1:
        return str(start)
    return f"{start},{length}"


def _context_range(start: int, length: int) -> str:
    if length == 0:
        return str(start - 1)
    if length == 1:
        return str(start)
    return f"{start},{start + length - 1}"


class NormalFormat(DiffFormat):
    """Classic ``diff`` output: ``2c2``, ``< old``, ``---``, ``> new``."""

    name = "normal"

    def hunk_header(self, hunk: Hunk) -> str:
        xbeg, xlen = hunk.orig_start, hunk.orig_len
        ybeg, ylen = hunk.final_start, hunk.final_len
        xrange = f"{xbeg},{xbeg + xlen - 1}" if xlen > 1 else str(xbeg)
        yrange = f"{ybeg},{ybeg + ylen - 1}" if ylen > 1 else str(ybeg)
        if xlen and not ylen:
            yrange = str(ybeg - 1)
        elif not xlen:
            xrange = str(xbeg - 1)
        action = ("c" if ylen else "d") if xlen else "a"
        return f"{xrange}{action}{yrange}"

    def context(self, lines: Sequence[str]) -> str:
        return self.prefix_lines(lines, "  ")

    def added(self, lines: Sequence[str]) -> str:
        return self.prefix_lines(lines, "> ")

    def deleted(self, lines: Sequence[str]) -> str:
        return self.prefix_lines(lines, "< ")

    def changed(self, orig: Sequence[str], final: Sequence[str]) -> str:
        return self.deleted(orig) + "---\n" + self.added(final)


class UnifiedFormat(DiffFormat):
    """Unified diff: ``@@ -start[,len] +start[,len] @@``, `` ``/``+``/``-`` lines."""

    name = "unified"
    default_leading_context_lines = 4
    default_trailing_context_lines = 4

    def hunk_header(self, hunk: Hunk) -> str:
        return (
            f"@@ -{_unified_range(hunk.orig_start, hunk.orig_len)} "
            f"+{_unified_range(hunk.final_start, hunk.final_len)} @@"
        )

    def context(self, lines: Sequence[str]) -> str:
        return self.prefix_lines(lines, " ")

    def added(self, lines: Sequence[str]) -> str:
        return self.prefix_lines(lines, "+")

    def deleted(self, lines: Sequence[str]) -> str:
        return self.prefix_lines(lines, "-")

    def changed(self, orig: Sequence[str], final: Sequence[str]) -> str:
        return self.deleted(orig) + self.added(final)


class ContextFormat(DiffFormat):
    """Context diff: an original half and a final half per hunk.

    Each half is built in full before the hunk is emitted, so the format
    needs no state between hunks::

        ***************
        *** 1,3 ****
          same
        ! old
        --- 1,3 ----
          same
        ! new
    """

    name = "context"
    default_leading_context_lines = 4
    default_trailing_context_lines = 4

    def hunk_header(self, hunk: Hunk) -> str:
        return (
            "***************\n"
            f"*** {_context_range(hunk.orig_start, hunk.orig_len)} ****"
        )

    def final_header(self, hunk: Hunk) -> str:
        return f"--- {_context_range(hunk.final_start, hunk.final_len)} ----"

    def context(self, lines: Sequence[str]) -> str:
        return self.prefix_lines(lines, "  ")

    def added(self, lines: Sequence[str]) -> str:
        return self.prefix_lines(lines, "+ ")

    def deleted(self, lines: Sequence[str]) -> str:
        return self.prefix_lines(lines, "- ")

    def changed(self, orig: Sequence[str], final: Sequence[str]) -> str:
        return self.prefix_lines(orig, "! ")

    def render_hunk(self, hunk: Hunk) -> str:
        first = [self.start_block(self.hunk_header(hunk))]
        second = [self.start_block(self.final_header(hunk))]
        for edit in hunk.edits:
            match edit:
                case Copy():
                    first.append(self.context(edit.orig))
                    second.append(self.context(edit.final))
                case Add():
                    second.append(self.added(edit.final))
                case Delete():
                    first.append(self.deleted(edit.orig))
                case Change():
                    first.append(self.changed(edit.orig, edit.final))
                    second.append(self.prefix_lines(edit.final, "! "))
        return "".join(first) + "".join(second) + self.end_block()


class ColoredUnifiedFormat(UnifiedFormat):
    """Unified diff with the header, additions and deletions colored.

    Args:
        colorizer: Collaborator that wraps text in color spans, e.g.
            ``AnsiColorizer``.

    Raises:
        ConfigurationError: If no colorizer is supplied.
    """

    name = "colored"

    def __init__(self, colorizer: Colorizer | None = None) -> None:
        if colorizer is None:
            raise ConfigurationError(
                "ColoredUnifiedFormat requires a colorizer collaborator"
            )
        self.colorizer = colorizer

    def get_params(self) -> dict[str, Any]:
        return {"colorizer": self.colorizer}

    def hunk_header(self, hunk: Hunk) -> str:
        return self.colorizer.color("lightmagenta", super().hunk_header(hunk))

    def added(self, lines: Sequence[str]) -> str:
        return self.colorizer.color("lightgreen", super().added(lines))

    def deleted(self, lines: Sequence[str]) -> str:
        return self.colorizer.color("lightred", super().deleted(lines))
