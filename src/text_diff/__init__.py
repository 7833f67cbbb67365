"""text_diff: line diffing, three-way merging and diff rendering.

Typical use::

    from text_diff import Diff, ThreeWayMerge, create_renderer

    diff = Diff.compute(["same", "old"], ["same", "new"])
    print(create_renderer("unified").render(diff))
"""

__version__ = "1.0.0"

from .diff import Diff, MappedDiff, available_engines, create_engine
from .errors import (
    BackendUnavailable,
    ConfigurationError,
    DiffError,
    DiffIntegrityError,
    InputMismatch,
    MalformedPatch,
    OriginMismatch,
    UnknownEngine,
)
from .merge import ConflictMarkers, ThreeWayMerge
from .render import Renderer, create_renderer

__all__ = [
    "BackendUnavailable",
    "ConfigurationError",
    "ConflictMarkers",
    "Diff",
    "DiffError",
    "DiffIntegrityError",
    "InputMismatch",
    "MalformedPatch",
    "MappedDiff",
    "OriginMismatch",
    "Renderer",
    "ThreeWayMerge",
    "UnknownEngine",
    "__version__",
    "available_engines",
    "create_engine",
    "create_renderer",
]
