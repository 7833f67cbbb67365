"""Hunk walker shared by every output format.

``Renderer`` walks a coalesced edit script, tracks line numbers on both
sides and groups operations into ``Hunk`` objects:

- A hunk opens at a non-``Copy`` operation, preceded by up to
  ``leading_context_lines`` lines of the previous ``Copy``.
- A following ``Copy`` no longer than ``leading + trailing`` lines (or, at
  the end of the script, no longer than ``trailing``) stays in the hunk.
- A longer ``Copy`` contributes its first ``trailing_context_lines`` lines
  and closes the hunk; its tail becomes leading context for the next one.

How a hunk becomes text is delegated to a ``DiffFormat`` strategy, which
supplies the hunk header and the formatting of context, added, deleted and
changed lines.  Formats are plain objects; each ``render()`` call builds
its output locally, so a format never carries state between calls.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from text_diff.diff.facade import Diff
from text_diff.diff.ops import Add, Change, Copy, Delete, Operation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Hunk:
    """One contiguous, context-bounded region of an edit script.

    Starts are 1-based line numbers of the first line of the hunk on each
    side; lengths count the lines each side contributes.
    """

    orig_start: int
    orig_len: int
    final_start: int
    final_len: int
    edits: tuple[Operation, ...]


class DiffFormat:
    """Formatting strategy for one output format.

    Subclasses implement ``hunk_header``, ``context``, ``added``,
    ``deleted`` and ``changed``; the remaining hooks have sensible defaults.
    """

    name = "base"
    default_leading_context_lines = 0
    default_trailing_context_lines = 0

    def get_params(self) -> dict[str, Any]:
        """Format-specific parameters (markers, affixes, ...)."""
        return {}

    # -- hooks ---------------------------------------------------------

    def start_diff(self) -> str:
        return ""

    def end_diff(self) -> str:
        return ""

    def hunk_header(self, hunk: Hunk) -> str:
        raise NotImplementedError

    def start_block(self, header: str) -> str:
        return f"{header}\n"

    def end_block(self) -> str:
        return ""

    def context(self, lines: Sequence[str]) -> str:
        raise NotImplementedError

    def added(self, lines: Sequence[str]) -> str:
        raise NotImplementedError

    def deleted(self, lines: Sequence[str]) -> str:
        raise NotImplementedError

    def changed(self, orig: Sequence[str], final: Sequence[str]) -> str:
        raise NotImplementedError

    # -- composition ---------------------------------------------------

    def render_hunk(self, hunk: Hunk) -> str:
        parts = [self.start_block(self.hunk_header(hunk))]
        for edit in hunk.edits:
            match edit:
                case Copy():
                    parts.append(self.context(edit.orig))
                case Add():
                    parts.append(self.added(edit.final))
                case Delete():
                    parts.append(self.deleted(edit.orig))
                case Change():
                    parts.append(self.changed(edit.orig, edit.final))
        parts.append(self.end_block())
        return "".join(parts)

    @staticmethod
    def prefix_lines(lines: Sequence[str], prefix: str = " ") -> str:
        """Prefix every line and terminate each with a newline."""
        return "".join(f"{prefix}{line}\n" for line in lines)


class Renderer:
    """Render edit scripts with a given ``DiffFormat``.

    Args:
        fmt: The output format strategy.
        leading_context_lines: Unchanged lines kept before a change;
            defaults to the format's own default.
        trailing_context_lines: Unchanged lines kept after a change;
            defaults to the format's own default.
    """

    def __init__(
        self,
        fmt: DiffFormat,
        leading_context_lines: int | None = None,
        trailing_context_lines: int | None = None,
    ) -> None:
        self.format = fmt
        self.leading_context_lines = (
            fmt.default_leading_context_lines
            if leading_context_lines is None
            else leading_context_lines
        )
        self.trailing_context_lines = (
            fmt.default_trailing_context_lines
            if trailing_context_lines is None
            else trailing_context_lines
        )
        if self.leading_context_lines < 0 or self.trailing_context_lines < 0:
            raise ValueError("Context line counts must be >= 0")

    def get_params(self) -> dict[str, Any]:
        return {
            "leading_context_lines": self.leading_context_lines,
            "trailing_context_lines": self.trailing_context_lines,
            **self.format.get_params(),
        }

    def render(self, diff: Diff | Iterable[Operation]) -> str:
        """Render *diff* (a ``Diff`` or a sequence of operations) as text."""
        edits = diff.edits if isinstance(diff, Diff) else tuple(diff)
        parts = [self.format.start_diff()]
        hunk_count = 0
        for hunk in self.iter_hunks(edits):
            parts.append(self.format.render_hunk(hunk))
            hunk_count += 1
        parts.append(self.format.end_diff())
        logger.debug(
            "Rendered %d operations as %d %s hunks",
            len(edits),
            hunk_count,
            self.format.name,
        )
        return "".join(parts)

    def iter_hunks(self, edits: Sequence[Operation]) -> Iterator[Hunk]:
        """Group *edits* into context-bounded hunks."""
        nlead = self.leading_context_lines
        ntrail = self.trailing_context_lines
        xi = yi = 1
        x0 = y0 = 1
        block: list[Operation] | None = None
        context: Copy | None = None
        last = len(edits) - 1

        for index, edit in enumerate(edits):
            if isinstance(edit, Copy):
                if block is not None:
                    keep = ntrail if index == last else nlead + ntrail
                    if edit.orig_count() <= keep:
                        block.append(edit)
                    else:
                        if ntrail:
                            block.append(_slice_copy(edit, 0, ntrail))
                        yield Hunk(
                            x0,
                            ntrail + xi - x0,
                            y0,
                            ntrail + yi - y0,
                            tuple(block),
                        )
                        block = None
                context = edit
            else:
                if block is None:
                    block = []
                    if context is not None and nlead:
                        count = context.orig_count()
                        lead = _slice_copy(context, max(count - nlead, 0), count)
                        block.append(lead)
                    x0 = xi - sum(op.orig_count() for op in block)
                    y0 = yi - sum(op.orig_count() for op in block)
                block.append(edit)

            xi += edit.orig_count()
            yi += edit.final_count()

        if block is not None:
            yield Hunk(x0, xi - x0, y0, yi - y0, tuple(block))


def _slice_copy(edit: Copy, start: int, stop: int) -> Copy:
    """Return lines ``start:stop`` of *edit*, keeping a mapped final side."""
    if edit.final_lines is None:
        return Copy(lines=edit.lines[start:stop])
    return Copy(
        lines=edit.lines[start:stop], final_lines=edit.final_lines[start:stop]
    )
