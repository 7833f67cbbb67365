"""Charset-safe string collaborators.

Python strings are already Unicode, so the helpers here are thin, pure and
locale-independent.  They exist as named collaborators so that mapped diffs
can be configured with them, and so that case folding can be memoised in a
caller-owned ``CaseFoldCache`` instead of process-wide state.
"""

from __future__ import annotations

from collections import OrderedDict


def lowercase(value: str) -> str:
    """Locale-independent lowercase."""
    return value.lower()


def uppercase(value: str) -> str:
    """Locale-independent uppercase."""
    return value.upper()


def length(value: str) -> int:
    """Length in characters (code points), not bytes."""
    return len(value)


def substring(value: str, start: int, size: int | None = None) -> str:
    """Return *size* characters of *value* from *start* (to the end when omitted).

    A negative *start* counts from the end, as in slicing.
    """
    if size is None:
        return value[start:]
    if size < 0:
        raise ValueError(f"substring size must be >= 0, got {size}")
    end = start + size
    if start < 0 and end >= 0:
        return value[start:]
    return value[start:end]


class CaseFoldCache:
    """Bounded least-recently-used cache for case folding.

    Owned by the caller and passed explicitly where memoisation pays off
    (e.g. repeated case-insensitive diffs over the same corpus).
    """

    def __init__(self, max_size: int = 4096) -> None:
        if max_size < 1:
            raise ValueError(f"max_size must be >= 1, got {max_size}")
        self.max_size = max_size
        self._entries: OrderedDict[str, str] = OrderedDict()
        self.hits = 0
        self.misses = 0

    def fold(self, value: str) -> str:
        folded = self._entries.get(value)
        if folded is not None:
            self._entries.move_to_end(value)
            self.hits += 1
            return folded
        self.misses += 1
        folded = lowercase(value)
        self._entries[value] = folded
        if len(self._entries) > self.max_size:
            self._entries.popitem(last=False)
        return folded

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0
