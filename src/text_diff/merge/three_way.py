"""Three-way merge of two edit scripts that share an origin.

Both final versions are diffed against the origin, then the two scripts are
walked in lockstep by consumed-origin offset:

* Where both scripts copy, the shorter copy run is emitted as a
  ``ThreeWayCopy`` (flushing any pending block first).
* Everywhere else, origin lines and each side's output are accumulated in a
  ``BlockAccumulator`` until the next common copy, then flushed as a single
  block: ``Stable`` when at most one side changed it (or both changed it
  identically), ``Conflict`` otherwise.

Output is in origin order.  Conflicts are ordinary results, not errors;
``conflict_count == 0`` means the merge was fully automatic.

Conflict markers follow the Git convention by default and are configurable
through ``ConflictMarkers``::

    <<<<<<< label1
    side 1 lines
    =======
    side 2 lines
    >>>>>>> label2
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from text_diff.diff.engines import DiffEngine
from text_diff.diff.facade import _resolve_engine
from text_diff.diff.ops import Copy, Operation
from text_diff.errors import OriginMismatch

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Merge operations
# ---------------------------------------------------------------------------


class ThreeWayCopy(BaseModel):
    """Lines identical in the origin and both final versions."""

    kind: Literal["copy"] = "copy"
    lines: tuple[str, ...]

    model_config = {"frozen": True}

    @property
    def orig(self) -> tuple[str, ...]:
        return self.lines

    def merged(self) -> tuple[str, ...]:
        return self.lines

    def is_conflict(self) -> bool:
        return False


class Stable(BaseModel):
    """A block changed on at most one side, or identically on both.

    ``lines`` is the resolved content; ``orig`` the origin block it replaces.
    """

    kind: Literal["stable"] = "stable"
    orig: tuple[str, ...] = ()
    lines: tuple[str, ...] = ()

    model_config = {"frozen": True}

    def merged(self) -> tuple[str, ...]:
        return self.lines

    def is_conflict(self) -> bool:
        return False


class Conflict(BaseModel):
    """A block both sides changed differently; needs manual resolution."""

    kind: Literal["conflict"] = "conflict"
    orig: tuple[str, ...] = ()
    final1: tuple[str, ...] = ()
    final2: tuple[str, ...] = ()

    model_config = {"frozen": True}

    def merged(self) -> None:
        return None

    def is_conflict(self) -> bool:
        return True

    def swapped(self) -> Conflict:
        return Conflict(orig=self.orig, final1=self.final2, final2=self.final1)


ThreeWayOperation = Annotated[
    Union[ThreeWayCopy, Stable, Conflict], Field(discriminator="kind")
]


class ConflictMarkers(BaseModel):
    """Marker lines written around a conflict by ``merged_output()``."""

    start: str = "<<<<<<<"
    mid: str = "======="
    end: str = ">>>>>>>"

    model_config = {"frozen": True}

    def opening(self, label: str | None = None) -> str:
        return f"{self.start} {label}" if label else self.start

    def closing(self, label: str | None = None) -> str:
        return f"{self.end} {label}" if label else self.end


# ---------------------------------------------------------------------------
# Block accumulation
# ---------------------------------------------------------------------------


@dataclass
class BlockAccumulator:
    """Growing origin / side-1 / side-2 buffers between two common copies."""

    orig: list[str] = field(default_factory=list)
    final1: list[str] = field(default_factory=list)
    final2: list[str] = field(default_factory=list)

    def input(self, lines: Sequence[str]) -> None:
        self.orig.extend(lines)

    def out1(self, lines: Sequence[str]) -> None:
        self.final1.extend(lines)

    def out2(self, lines: Sequence[str]) -> None:
        self.final2.extend(lines)

    def is_empty(self) -> bool:
        return not self.orig and not self.final1 and not self.final2

    def finish(self) -> Stable | Conflict | None:
        """Classify and reset the pending block; ``None`` if nothing is pending."""
        if self.is_empty():
            return None
        orig = tuple(self.orig)
        final1 = tuple(self.final1)
        final2 = tuple(self.final2)
        self.orig, self.final1, self.final2 = [], [], []

        if final1 == final2:
            return Stable(orig=orig, lines=final1)
        if final1 == orig:
            return Stable(orig=orig, lines=final2)
        if final2 == orig:
            return Stable(orig=orig, lines=final1)
        return Conflict(orig=orig, final1=final1, final2=final2)


class _Cursor:
    """Position inside one edit script, with the unconsumed part of the current op."""

    def __init__(self, edits: Sequence[Operation]) -> None:
        self._edits = iter(edits)
        self.current: Operation | None = None
        self.orig: list[str] = []
        self.final: list[str] = []
        self.advance()

    def advance(self) -> None:
        self.current = next(self._edits, None)
        if self.current is not None:
            self.orig = list(self.current.orig)
            self.final = list(self.current.final)

    def is_copy(self) -> bool:
        return isinstance(self.current, Copy)

    def take_orig(self, count: int) -> list[str]:
        taken, self.orig = self.orig[:count], self.orig[count:]
        return taken

    def take_final(self, count: int) -> list[str]:
        taken, self.final = self.final[:count], self.final[count:]
        return taken


def merge_scripts(
    edits1: Sequence[Operation], edits2: Sequence[Operation]
) -> list[Stable | Conflict | ThreeWayCopy]:
    """Combine two scripts over the same origin into merge operations."""
    merged: list[Stable | Conflict | ThreeWayCopy] = []
    block = BlockAccumulator()
    side1 = _Cursor(edits1)
    side2 = _Cursor(edits2)

    while side1.current is not None or side2.current is not None:
        if side1.is_copy() and side2.is_copy():
            pending = block.finish()
            if pending is not None:
                merged.append(pending)

            ncopy = min(len(side1.orig), len(side2.orig))
            merged.append(ThreeWayCopy(lines=tuple(side1.orig[:ncopy])))
            for side in (side1, side2):
                if len(side.orig) > ncopy:
                    side.take_orig(ncopy)
                    side.take_final(ncopy)
                else:
                    side.advance()
            continue

        if side1.current is not None and side2.current is not None:
            if side1.orig and side2.orig:
                norig = min(len(side1.orig), len(side2.orig))
                block.input(side1.take_orig(norig))
                side2.take_orig(norig)
                if side1.is_copy():
                    block.out1(side1.take_final(norig))
                if side2.is_copy():
                    block.out2(side2.take_final(norig))

        # An op whose origin part is used up contributes its final lines.
        if side1.current is not None and not side1.orig:
            block.out1(side1.final)
            side1.advance()
        if side2.current is not None and not side2.orig:
            block.out2(side2.final)
            side2.advance()

    pending = block.finish()
    if pending is not None:
        merged.append(pending)
    return merged


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


class ThreeWayMerge:
    """Merge two versions derived from a common origin.

    Example::

        merge = ThreeWayMerge(origin, mine, theirs)
        if merge.is_clean:
            lines = merge.merged_output()
    """

    def __init__(
        self,
        origin: Sequence[str],
        final1: Sequence[str],
        final2: Sequence[str],
        engine: str | DiffEngine = "auto",
    ) -> None:
        diff_engine = _resolve_engine(engine)
        self._init_edits(
            diff_engine.diff(list(origin), list(final1)),
            diff_engine.diff(list(origin), list(final2)),
        )

    @classmethod
    def from_scripts(
        cls, edits1: Sequence[Operation], edits2: Sequence[Operation]
    ) -> ThreeWayMerge:
        """Merge two precomputed edit scripts that share the same origin.

        Raises:
            OriginMismatch: If the scripts consume different numbers of
                origin lines.
        """
        origin1 = sum(edit.orig_count() for edit in edits1)
        origin2 = sum(edit.orig_count() for edit in edits2)
        if origin1 != origin2:
            raise OriginMismatch(origin1, origin2)
        merge = cls.__new__(cls)
        merge._init_edits(edits1, edits2)
        return merge

    def _init_edits(
        self, edits1: Sequence[Operation], edits2: Sequence[Operation]
    ) -> None:
        self.edits: list[Stable | Conflict | ThreeWayCopy] = merge_scripts(
            edits1, edits2
        )
        self.conflict_count = 0
        offset = 0
        for edit in self.edits:
            if isinstance(edit, Conflict):
                self.conflict_count += 1
                logger.debug(
                    "Conflict at origin line %d (%d origin lines)",
                    offset + 1,
                    len(edit.orig),
                )
            offset += len(edit.orig)
        logger.debug(
            "Three-way merge produced %d blocks, %d conflicts",
            len(self.edits),
            self.conflict_count,
        )

    @property
    def is_clean(self) -> bool:
        return self.conflict_count == 0

    @property
    def conflicts(self) -> list[Conflict]:
        return [edit for edit in self.edits if isinstance(edit, Conflict)]

    def merged_output(
        self,
        label1: str | None = None,
        label2: str | None = None,
        markers: ConflictMarkers | None = None,
    ) -> list[str]:
        """Return the merged lines, with conflicts bracketed by markers."""
        markers = markers or ConflictMarkers()
        lines: list[str] = []
        for edit in self.edits:
            if isinstance(edit, Conflict):
                lines.append(markers.opening(label1))
                lines.extend(edit.final1)
                lines.append(markers.mid)
                lines.extend(edit.final2)
                lines.append(markers.closing(label2))
            else:
                lines.extend(edit.merged())
        return lines
