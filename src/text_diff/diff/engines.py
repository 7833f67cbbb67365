"""Diff engines: produce an edit script from two line sequences.

Every engine satisfies the same contract::

    engine.diff(original, final) -> list[Operation]

The result is deterministic, coalesced, round-trips to both inputs and is a
shortest edit script (minimal number of added plus deleted lines).

Engines:

- ``NativeEngine`` (``"native"``): in-process Myers O(ND) search.  Always
  available; this is the reference engine.
- ``RapidfuzzEngine`` (``"rapidfuzz"``, alias ``"xdiff"``): C++-accelerated
  Indel edit operations from the ``rapidfuzz`` distribution (install the
  ``accel`` extra).
- ``StringEngine`` (``"string"``): parses an existing unified or context
  patch instead of computing one; see ``text_diff.diff.patch``.

``create_engine(name)`` is the single boundary that turns a name into an
engine.  ``"auto"`` picks the first available engine in ``AUTO_PRIORITY``.
Naming an engine that cannot run raises ``BackendUnavailable``; there is no
silent fallback.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from text_diff.diff.ops import Operation, ScriptBuilder
from text_diff.errors import BackendUnavailable, UnknownEngine

try:
    from rapidfuzz.distance import Indel
except ImportError:  # pragma: no cover - depends on installed extras
    Indel = None

logger = logging.getLogger(__name__)

AUTO_PRIORITY: tuple[str, ...] = ("rapidfuzz", "native")


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


class DiffEngine(Protocol):
    """Protocol that all line-sequence engines satisfy."""

    name: str

    def diff(
        self, original: Sequence[str], final: Sequence[str]
    ) -> list[Operation]:
        """Compute the edit script turning *original* into *final*."""
        ...  # pragma: no cover


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _intern(
    original: Sequence[str], final: Sequence[str]
) -> tuple[list[int], list[int]]:
    """Map every distinct line to a small integer.

    Integer comparison is cheap, and equal ids mean equal lines with no
    possibility of hash collisions.
    """
    ids: dict[str, int] = {}
    a = [ids.setdefault(line, len(ids)) for line in original]
    b = [ids.setdefault(line, len(ids)) for line in final]
    return a, b


def _common_affixes(a: Sequence[int], b: Sequence[int]) -> tuple[int, int]:
    """Return the lengths of the common prefix and the common suffix."""
    limit = min(len(a), len(b))
    prefix = 0
    while prefix < limit and a[prefix] == b[prefix]:
        prefix += 1
    suffix = 0
    while (
        suffix < limit - prefix
        and a[len(a) - 1 - suffix] == b[len(b) - 1 - suffix]
    ):
        suffix += 1
    return prefix, suffix


# ---------------------------------------------------------------------------
# Native engine
# ---------------------------------------------------------------------------


class NativeEngine:
    """Reference engine: Myers' greedy shortest-edit-script search.

    Common leading and trailing lines are stripped first, then the middle
    is searched with the classic forward greedy algorithm.  Among edit
    scripts of equal length it keeps the one whose diagonal furthest along
    the original was reached first; when backtracking, a deletion is taken
    before an insertion at the same point, so within a changed region the
    deleted lines always precede the added ones.
    """

    name = "native"

    def diff(
        self, original: Sequence[str], final: Sequence[str]
    ) -> list[Operation]:
        a, b = _intern(original, final)
        prefix, suffix = _common_affixes(a, b)

        builder = ScriptBuilder()
        builder.copy(original[:prefix])

        a_mid = a[prefix : len(a) - suffix]
        b_mid = b[prefix : len(b) - suffix]
        for tag, i, j in self._walk(a_mid, b_mid):
            if tag == "equal":
                builder.copy([original[prefix + i]])
            elif tag == "delete":
                builder.delete([original[prefix + i]])
            else:
                builder.add([final[prefix + j]])

        builder.copy(original[len(original) - suffix :])
        edits = builder.finish()
        logger.debug(
            "native engine: %d x %d lines -> %d operations",
            len(original),
            len(final),
            len(edits),
        )
        return edits

    def _walk(
        self, a: Sequence[int], b: Sequence[int]
    ) -> list[tuple[str, int, int]]:
        """Return ``(tag, i, j)`` steps in forward order."""
        if not a:
            return [("insert", 0, j) for j in range(len(b))]
        if not b:
            return [("delete", i, 0) for i in range(len(a))]

        trace = self._shortest_edit(a, b)
        steps: list[tuple[str, int, int]] = []
        x, y = len(a), len(b)

        for d in range(len(trace) - 1, -1, -1):
            v = trace[d]
            k = x - y
            if k == -d or (k != d and v[k - 1] < v[k + 1]):
                prev_k = k + 1
            else:
                prev_k = k - 1
            prev_x = v[prev_k]
            prev_y = prev_x - prev_k

            while x > prev_x and y > prev_y:
                x -= 1
                y -= 1
                steps.append(("equal", x, y))

            if d > 0:
                if x == prev_x:
                    steps.append(("insert", prev_x, prev_y))
                else:
                    steps.append(("delete", prev_x, prev_y))

            x, y = prev_x, prev_y

        steps.reverse()
        return steps

    @staticmethod
    def _shortest_edit(
        a: Sequence[int], b: Sequence[int]
    ) -> list[dict[int, int]]:
        """Forward greedy search; returns the furthest-reaching x per diagonal, per step."""
        n, m = len(a), len(b)
        v: dict[int, int] = {1: 0}
        trace: list[dict[int, int]] = []

        for d in range(n + m + 1):
            trace.append(v.copy())
            for k in range(-d, d + 1, 2):
                if k == -d or (k != d and v[k - 1] < v[k + 1]):
                    x = v[k + 1]
                else:
                    x = v[k - 1] + 1
                y = x - k
                while x < n and y < m and a[x] == b[y]:
                    x += 1
                    y += 1
                v[k] = x
                if x >= n and y >= m:
                    return trace
        return trace  # pragma: no cover - loop always returns


# ---------------------------------------------------------------------------
# Accelerated engine
# ---------------------------------------------------------------------------


class RapidfuzzEngine:
    """Accelerated engine backed by ``rapidfuzz.distance.Indel``.

    Indel distance only allows insertions and deletions, so its edit
    operations form a longest-common-subsequence alignment.  Operation
    boundaries may differ from ``NativeEngine`` but the script has the same
    length and round-trips identically.
    """

    name = "rapidfuzz"

    def __init__(self) -> None:
        if not self.is_available():
            raise BackendUnavailable(
                self.name,
                "the 'rapidfuzz' package is not installed "
                "(pip install 'text-diff-engine[accel]')",
            )

    @staticmethod
    def is_available() -> bool:
        return Indel is not None

    def diff(
        self, original: Sequence[str], final: Sequence[str]
    ) -> list[Operation]:
        a, b = _intern(original, final)
        builder = ScriptBuilder()
        for op in Indel.opcodes(a, b):
            if op.tag == "equal":
                builder.copy(original[op.src_start : op.src_end])
            else:
                builder.delete(original[op.src_start : op.src_end])
                builder.add(final[op.dest_start : op.dest_end])
        edits = builder.finish()
        logger.debug(
            "rapidfuzz engine: %d x %d lines -> %d operations",
            len(original),
            len(final),
            len(edits),
        )
        return edits


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def _string_engine():
    # Imported lazily: the patch module imports this one.
    from text_diff.diff.patch import StringEngine

    return StringEngine()


_ENGINE_MAP: dict[str, object] = {
    "native": NativeEngine,
    "rapidfuzz": RapidfuzzEngine,
    "xdiff": RapidfuzzEngine,
    "string": _string_engine,
}

_AVAILABILITY = {
    "native": lambda: True,
    "rapidfuzz": RapidfuzzEngine.is_available,
}


def engine_names() -> list[str]:
    """Return every name ``create_engine()`` accepts, including ``"auto"``."""
    return sorted([*_ENGINE_MAP, "auto"])


def available_engines() -> list[str]:
    """Return the computing engines usable here, in ``"auto"`` priority order."""
    return [name for name in AUTO_PRIORITY if _AVAILABILITY[name]()]


def resolve_engine_name(name: str) -> str:
    """Resolve ``"auto"`` and aliases to a concrete registry name.

    Raises:
        UnknownEngine: If *name* is not registered.
    """
    key = name.strip().lower()
    if key == "auto":
        return available_engines()[0]
    if key not in _ENGINE_MAP:
        raise UnknownEngine(
            f"Unknown diff engine: '{name}'. Valid engines: {engine_names()}"
        )
    if key == "xdiff":
        return "rapidfuzz"
    return key


def create_engine(name: str = "auto"):
    """Create a diff engine by name.

    Args:
        name: One of ``"native"``, ``"rapidfuzz"`` (alias ``"xdiff"``),
            ``"string"`` or ``"auto"``.

    Returns:
        An engine instance.

    Raises:
        UnknownEngine: If *name* is not registered.
        BackendUnavailable: If the named backend cannot run here.
    """
    resolved = resolve_engine_name(name)
    logger.debug("Selected diff engine '%s' (requested '%s')", resolved, name)
    return _ENGINE_MAP[resolved]()  # type: ignore[operator]
