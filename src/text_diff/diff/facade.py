"""Diff facade: one computed edit script plus queries over it."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from pydantic import BaseModel

from text_diff.diff.engines import DiffEngine, create_engine
from text_diff.diff.ops import Add, Change, Copy, Delete, Operation, reverse_script
from text_diff.diff.patch import StringEngine
from text_diff.errors import ConfigurationError, DiffIntegrityError
from text_diff.lines import split_lines, trim_newlines

logger = logging.getLogger(__name__)


def _resolve_engine(engine: str | DiffEngine) -> DiffEngine:
    if not isinstance(engine, str):
        return engine
    instance = create_engine(engine)
    if isinstance(instance, StringEngine):
        raise ConfigurationError(
            "The 'string' engine parses patch text; use Diff.from_patch() instead"
        )
    return instance


class Diff(BaseModel):
    """An immutable edit script between two line sequences.

    Build one with ``Diff.compute()`` (two line sequences),
    ``Diff.from_text()`` (two strings) or ``Diff.from_patch()`` (existing
    patch text).  The operations are available as ``edits``.
    """

    edits: tuple[Operation, ...] = ()

    model_config = {"frozen": True}

    @classmethod
    def compute(
        cls,
        original: Sequence[str],
        final: Sequence[str],
        engine: str | DiffEngine = "auto",
        strip_newlines: bool = False,
    ) -> Diff:
        """Diff two line sequences with the named (or given) engine.

        With ``strip_newlines`` the line terminators are removed first, so
        ``file.readlines()`` output from LF and CRLF files compares equal.

        Raises:
            UnknownEngine: If the engine name is not registered.
            BackendUnavailable: If the named engine cannot run here.
            ConfigurationError: If the patch-parsing engine is named.
        """
        if strip_newlines:
            original = trim_newlines(original)
            final = trim_newlines(final)
        edits = _resolve_engine(engine).diff(list(original), list(final))
        return cls(edits=tuple(edits))

    @classmethod
    def from_text(
        cls,
        original: str,
        final: str,
        engine: str | DiffEngine = "auto",
        keepends: bool = False,
    ) -> Diff:
        """Split two strings into lines and diff them."""
        return cls.compute(
            split_lines(original, keepends),
            split_lines(final, keepends),
            engine,
        )

    @classmethod
    def from_patch(cls, patch: str, mode: str = "autodetect") -> Diff:
        """Parse unified or context patch text into a diff.

        Raises:
            MalformedPatch: If the patch cannot be interpreted.
        """
        return cls(edits=tuple(StringEngine().diff(patch, mode)))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def count_added(self) -> int:
        """Number of lines added (``Add`` and the final side of ``Change``)."""
        return sum(
            edit.final_count()
            for edit in self.edits
            if isinstance(edit, (Add, Change))
        )

    def count_deleted(self) -> int:
        """Number of lines deleted (``Delete`` and the original side of ``Change``)."""
        return sum(
            edit.orig_count()
            for edit in self.edits
            if isinstance(edit, (Delete, Change))
        )

    def is_empty(self) -> bool:
        """True when the two sequences were identical."""
        return all(isinstance(edit, Copy) for edit in self.edits)

    def lcs_length(self) -> int:
        """Length of the longest common subsequence (lines in ``Copy`` blocks)."""
        return sum(
            edit.orig_count() for edit in self.edits if isinstance(edit, Copy)
        )

    def reconstruct_original(self) -> list[str]:
        lines: list[str] = []
        for edit in self.edits:
            lines.extend(edit.orig)
        return lines

    def reconstruct_final(self) -> list[str]:
        lines: list[str] = []
        for edit in self.edits:
            lines.extend(edit.final)
        return lines

    def reverse(self) -> Diff:
        """Return the diff of the reversed comparison (final -> original)."""
        return self.model_copy(
            update={"edits": tuple(reverse_script(self.edits))}
        )

    def check(self, original: Sequence[str], final: Sequence[str]) -> bool:
        """Verify round-trip, reversed round-trip and coalescing.

        Meant for debugging and tests.

        Raises:
            DiffIntegrityError: On the first violated invariant.
        """
        if self.reconstruct_original() != list(original):
            raise DiffIntegrityError("Reconstructed original doesn't match")
        if self.reconstruct_final() != list(final):
            raise DiffIntegrityError("Reconstructed final doesn't match")

        rev = self.reverse()
        if rev.reconstruct_original() != list(final):
            raise DiffIntegrityError("Reversed original doesn't match")
        if rev.reconstruct_final() != list(original):
            raise DiffIntegrityError("Reversed final doesn't match")

        previous = None
        for edit in self.edits:
            if previous is not None and type(edit) is type(previous):
                raise DiffIntegrityError("Edit sequence is non-optimal")
            previous = edit
        return True
