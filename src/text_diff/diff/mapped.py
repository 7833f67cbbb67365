"""Mapped diffs: compare a projection of each line, emit the real lines.

Useful for case-insensitive diffs or diffs that ignore whitespace changes.
The engine runs on the projected sequences; the resulting script is then
re-sliced positionally against the unprojected sequences, so every
operation carries the original content.  A ``Copy`` whose two sides differ
only outside the projection keeps both sides (``Copy.final_lines``).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from text_diff.diff.engines import DiffEngine
from text_diff.diff.facade import Diff, _resolve_engine
from text_diff.diff.ops import Copy, Operation, ScriptBuilder
from text_diff.errors import InputMismatch
from text_diff.strings import CaseFoldCache, lowercase

logger = logging.getLogger(__name__)


def remap_script(
    edits: Sequence[Operation],
    original: Sequence[str],
    final: Sequence[str],
) -> list[Operation]:
    """Replace the content of *edits* with the same-offset slices of *original* / *final*."""
    builder = ScriptBuilder()
    xi = yi = 0
    for edit in edits:
        orig = original[xi : xi + edit.orig_count()]
        new = final[yi : yi + edit.final_count()]
        xi += len(orig)
        yi += len(new)
        if isinstance(edit, Copy):
            builder.copy(orig, new)
        else:
            builder.delete(orig)
            builder.add(new)
    return builder.finish()


class MappedDiff(Diff):
    """A diff computed on projected lines but carrying the original lines."""

    @classmethod
    def compute_mapped(
        cls,
        original: Sequence[str],
        final: Sequence[str],
        mapped_original: Sequence[str],
        mapped_final: Sequence[str],
        engine: str | DiffEngine = "auto",
    ) -> MappedDiff:
        """Diff *mapped_original* against *mapped_final*, emitting the unmapped lines.

        Raises:
            InputMismatch: If a content sequence and its projection differ
                in length.
        """
        if len(original) != len(mapped_original):
            raise InputMismatch("original", len(original), len(mapped_original))
        if len(final) != len(mapped_final):
            raise InputMismatch("final", len(final), len(mapped_final))

        projected = _resolve_engine(engine).diff(
            list(mapped_original), list(mapped_final)
        )
        edits = remap_script(projected, list(original), list(final))
        return cls(edits=tuple(edits))

    @classmethod
    def with_projection(
        cls,
        original: Sequence[str],
        final: Sequence[str],
        projection: Callable[[str], str],
        engine: str | DiffEngine = "auto",
    ) -> MappedDiff:
        """Diff using ``projection(line)`` as the comparison key of every line."""
        return cls.compute_mapped(
            original,
            final,
            [projection(line) for line in original],
            [projection(line) for line in final],
            engine,
        )

    @classmethod
    def ignore_case(
        cls,
        original: Sequence[str],
        final: Sequence[str],
        cache: CaseFoldCache | None = None,
        engine: str | DiffEngine = "auto",
    ) -> MappedDiff:
        """Case-insensitive diff; *cache* memoises folding across calls."""
        fold = cache.fold if cache is not None else lowercase
        return cls.with_projection(original, final, fold, engine)

    @classmethod
    def ignore_whitespace(
        cls,
        original: Sequence[str],
        final: Sequence[str],
        engine: str | DiffEngine = "auto",
    ) -> MappedDiff:
        """Diff that treats any run of whitespace as a single space and ignores the ends."""
        return cls.with_projection(
            original, final, lambda line: " ".join(line.split()), engine
        )
