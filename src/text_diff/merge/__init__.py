"""Three-way merging of two versions against a common origin."""

from .three_way import (
    BlockAccumulator,
    Conflict,
    ConflictMarkers,
    Stable,
    ThreeWayCopy,
    ThreeWayMerge,
    ThreeWayOperation,
    merge_scripts,
)

__all__ = [
    "BlockAccumulator",
    "Conflict",
    "ConflictMarkers",
    "Stable",
    "ThreeWayCopy",
    "ThreeWayMerge",
    "ThreeWayOperation",
    "merge_scripts",
]
