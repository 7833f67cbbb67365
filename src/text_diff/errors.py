"""Exception hierarchy for text_diff.

Every error raised by the library derives from ``DiffError`` so callers can
catch the whole family at one boundary.  Merge conflicts are *not* errors:
they are a normal ``Conflict`` block in the merge result.

- ``BackendUnavailable``: the requested engine cannot run here.
- ``MalformedPatch``: the patch parser met a line it cannot interpret.
- ``InputMismatch``: a mapped diff got paired sequences of unequal length.
- ``OriginMismatch``: two edit scripts to merge start from different origins.
- ``ConfigurationError``: invalid settings, or a renderer built without a
  required collaborator.
- ``UnknownEngine``: an engine name outside the registry.
"""

from __future__ import annotations


class DiffError(Exception):
    """Base class for all text_diff errors."""


class BackendUnavailable(DiffError):
    """Raised when a diff backend cannot run in the current environment."""

    def __init__(self, backend: str, reason: str) -> None:
        self.backend = backend
        self.reason = reason
        super().__init__(f"Diff backend '{backend}' is unavailable: {reason}")


class MalformedPatch(DiffError, ValueError):
    """Raised when patch text does not follow a recognised diff format.

    Attributes:
        line: The offending line, or ``None`` when the problem is global
            (e.g. the format could not be detected at all).
        line_number: 1-based position of ``line`` in the patch, if known.
    """

    def __init__(
        self,
        message: str,
        line: str | None = None,
        line_number: int | None = None,
    ) -> None:
        self.line = line
        self.line_number = line_number
        if line_number is not None:
            message = f"{message} (line {line_number}: {line!r})"
        elif line is not None:
            message = f"{message} ({line!r})"
        super().__init__(message)


class InputMismatch(DiffError, ValueError):
    """Raised when a comparison sequence and its content sequence differ in length."""

    def __init__(self, side: str, content_len: int, mapped_len: int) -> None:
        self.side = side
        self.content_len = content_len
        self.mapped_len = mapped_len
        super().__init__(
            f"Mapped {side} sequence has {mapped_len} lines but the "
            f"{side} content has {content_len}; they must be index-aligned"
        )


class ConfigurationError(DiffError, ValueError):
    """Raised for invalid configuration or a missing required collaborator."""


class UnknownEngine(ConfigurationError):
    """Raised when an engine name is not in the engine registry."""


class DiffIntegrityError(DiffError, AssertionError):
    """Raised by ``Diff.check()`` when an edit script violates its invariants."""


class OriginMismatch(DiffError, ValueError):
    """Raised when two edit scripts to be merged consume different origins."""

    def __init__(self, origin1: int, origin2: int) -> None:
        self.origin1 = origin1
        self.origin2 = origin2
        super().__init__(
            f"Edit scripts do not share an origin: {origin1} vs {origin2} origin lines"
        )
