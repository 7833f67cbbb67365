"""Edit operation model.

An *edit script* is an ordered list of operations transforming an original
sequence of lines into a final one:

- ``Copy``: lines present unchanged on both sides.
- ``Add``: lines present only in the final sequence.
- ``Delete``: lines present only in the original sequence.
- ``Change``: a block of original lines replaced by a block of final lines.

Every operation exposes ``orig`` and ``final`` (empty tuple when a side is
absent) plus ``orig_count()`` / ``final_count()``.  Concatenating the
``orig`` sides of a script reproduces the original sequence; concatenating
the ``final`` sides reproduces the final sequence.

All models are frozen pydantic models, so a script is an immutable value
that can be compared, hashed and dumped to JSON.  ``Operation`` is a
discriminated union on the ``kind`` field.

``ScriptBuilder`` assembles scripts from raw copy/delete/add runs and
guarantees the coalescing invariant: no two adjacent operations share a
tag.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

Lines = Annotated[tuple[str, ...], Field(min_length=1)]


class _EditOp(BaseModel):
    model_config = {"frozen": True}

    @property
    def orig(self) -> tuple[str, ...]:
        raise NotImplementedError  # pragma: no cover

    @property
    def final(self) -> tuple[str, ...]:
        raise NotImplementedError  # pragma: no cover

    def orig_count(self) -> int:
        return len(self.orig)

    def final_count(self) -> int:
        return len(self.final)


class Copy(_EditOp):
    """Unchanged lines.

    ``final_lines`` is only set by a mapped diff, where the comparison
    projection matched but the emitted content of the two sides differs
    (e.g. ``"Foo"`` vs ``"foo"`` in a case-insensitive diff).  Engines never
    set it, so for them ``orig == final`` always holds.
    """

    kind: Literal["copy"] = "copy"
    lines: Lines
    final_lines: Lines | None = None

    @property
    def orig(self) -> tuple[str, ...]:
        return self.lines

    @property
    def final(self) -> tuple[str, ...]:
        return self.final_lines if self.final_lines is not None else self.lines

    def reverse(self) -> Copy:
        if self.final_lines is None:
            return self
        return Copy(lines=self.final_lines, final_lines=self.lines)


class Add(_EditOp):
    """Lines only present in the final sequence."""

    kind: Literal["add"] = "add"
    lines: Lines

    @property
    def orig(self) -> tuple[str, ...]:
        return ()

    @property
    def final(self) -> tuple[str, ...]:
        return self.lines

    def reverse(self) -> Delete:
        return Delete(lines=self.lines)


class Delete(_EditOp):
    """Lines only present in the original sequence."""

    kind: Literal["delete"] = "delete"
    lines: Lines

    @property
    def orig(self) -> tuple[str, ...]:
        return self.lines

    @property
    def final(self) -> tuple[str, ...]:
        return ()

    def reverse(self) -> Add:
        return Add(lines=self.lines)


class Change(_EditOp):
    """A block of original lines replaced by a block of final lines."""

    kind: Literal["change"] = "change"
    orig_lines: Lines
    final_lines: Lines

    @property
    def orig(self) -> tuple[str, ...]:
        return self.orig_lines

    @property
    def final(self) -> tuple[str, ...]:
        return self.final_lines

    def reverse(self) -> Change:
        return Change(orig_lines=self.final_lines, final_lines=self.orig_lines)


Operation = Annotated[
    Union[Copy, Add, Delete, Change], Field(discriminator="kind")
]


def reverse_script(edits: Iterable[Operation]) -> list[Operation]:
    """Return the edit script for the reversed comparison (final -> original)."""
    return [edit.reverse() for edit in edits]


# ---------------------------------------------------------------------------
# Script assembly
# ---------------------------------------------------------------------------


class ScriptBuilder:
    """Accumulate copy/delete/add runs into a coalesced edit script.

    Deletions and additions that fall between the same two copied runs are
    folded into a single ``Delete``, ``Add`` or ``Change``; consecutive
    copied runs are folded into a single ``Copy``.
    """

    def __init__(self) -> None:
        self._ops: list[Operation] = []
        self._copied: list[str] = []
        self._copied_final: list[str] = []
        self._deleted: list[str] = []
        self._added: list[str] = []

    def copy(
        self, lines: Sequence[str], final: Sequence[str] | None = None
    ) -> None:
        """Append copied lines; ``final`` differs from ``lines`` only in mapped diffs."""
        if lines:
            self._flush_change()
            self._copied.extend(lines)
            self._copied_final.extend(lines if final is None else final)

    def delete(self, lines: Sequence[str]) -> None:
        if lines:
            self._flush_copy()
            self._deleted.extend(lines)

    def add(self, lines: Sequence[str]) -> None:
        if lines:
            self._flush_copy()
            self._added.extend(lines)

    def append(self, edit: Operation) -> None:
        """Feed an existing operation into the builder."""
        match edit:
            case Copy():
                self.copy(edit.orig, edit.final)
            case _:
                self.delete(edit.orig)
                self.add(edit.final)

    def finish(self) -> list[Operation]:
        self._flush_copy()
        self._flush_change()
        ops, self._ops = self._ops, []
        return ops

    def _flush_copy(self) -> None:
        if self._copied:
            orig = tuple(self._copied)
            final = tuple(self._copied_final)
            if orig == final:
                self._ops.append(Copy(lines=orig))
            else:
                self._ops.append(Copy(lines=orig, final_lines=final))
            self._copied = []
            self._copied_final = []

    def _flush_change(self) -> None:
        if self._deleted and self._added:
            self._ops.append(
                Change(
                    orig_lines=tuple(self._deleted),
                    final_lines=tuple(self._added),
                )
            )
        elif self._deleted:
            self._ops.append(Delete(lines=tuple(self._deleted)))
        elif self._added:
            self._ops.append(Add(lines=tuple(self._added)))
        self._deleted = []
        self._added = []


def coalesce(edits: Iterable[Operation]) -> list[Operation]:
    """Return ``edits`` with adjacent same-tag operations merged."""
    builder = ScriptBuilder()
    for edit in edits:
        builder.append(edit)
    return builder.finish()
