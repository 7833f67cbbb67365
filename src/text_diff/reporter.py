"""Diff and merge report formatting functions.

Provides human-readable and machine-readable output:

- ``format_diff_summary`` -- counts and per-block summary of a diff.
- ``format_merge_report`` -- merge summary with one section per conflict.
- ``diff_to_json`` -- structured dict for JSON serialisation.
- ``merge_to_json`` -- structured dict for JSON serialisation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .diff.ops import Add, Change, Copy, Delete
from .merge.three_way import Conflict, Stable, ThreeWayCopy

if TYPE_CHECKING:
    from .diff.facade import Diff
    from .merge.three_way import ThreeWayMerge

PREVIEW_LINES = 5


def _preview(lines: tuple[str, ...], indent: str = "    ") -> list[str]:
    shown = [f"{indent}{line}" for line in lines[:PREVIEW_LINES]]
    if len(lines) > PREVIEW_LINES:
        shown.append(f"{indent}... ({len(lines) - PREVIEW_LINES} more lines)")
    return shown


# ------------------------------------------------------------------
# Human-readable reports
# ------------------------------------------------------------------


def format_diff_summary(diff: Diff) -> str:
    """Format a diff as a short human-readable summary.

    Lists every non-copy block with its original line range.  Identical
    inputs produce a single "No differences." line.

    Args:
        diff: The computed diff.

    Returns:
        Multi-line formatted string.
    """
    if diff.is_empty():
        return "No differences."

    lines: list[str] = []
    lines.append(
        f"{diff.count_added()} lines added, "
        f"{diff.count_deleted()} lines deleted, "
        f"{diff.lcs_length()} lines unchanged"
    )
    lines.append("")

    offset = 1
    for edit in diff.edits:
        match edit:
            case Add():
                lines.append(f"Added {edit.final_count()} after line {offset - 1}:")
                lines.extend(_preview(edit.final))
            case Delete():
                lines.append(
                    f"Deleted {edit.orig_count()} at line {offset}:"
                )
                lines.extend(_preview(edit.orig))
            case Change():
                lines.append(
                    f"Changed {edit.orig_count()} -> {edit.final_count()} "
                    f"at line {offset}:"
                )
                lines.extend(_preview(edit.orig, "  - "))
                lines.extend(_preview(edit.final, "  + "))
        offset += edit.orig_count()

    return "\n".join(lines).rstrip()


def format_merge_report(merge: ThreeWayMerge) -> str:
    """Format a three-way merge result for review.

    Args:
        merge: The completed merge.

    Returns:
        Multi-line formatted string; one section per conflict.
    """
    lines: list[str] = []
    if merge.is_clean:
        lines.append(f"Clean merge: {len(merge.edits)} blocks, no conflicts")
        return "\n".join(lines)

    lines.append(
        f"Merge has {merge.conflict_count} conflicts in {len(merge.edits)} blocks"
    )
    lines.append("")

    offset = 1
    for edit in merge.edits:
        if isinstance(edit, Conflict):
            lines.append(f"Conflict at origin line {offset}:")
            lines.append("  origin:")
            lines.extend(_preview(edit.orig))
            lines.append("  side 1:")
            lines.extend(_preview(edit.final1))
            lines.append("  side 2:")
            lines.extend(_preview(edit.final2))
            lines.append("")
        offset += len(edit.orig)

    return "\n".join(lines).rstrip()


# ------------------------------------------------------------------
# JSON output
# ------------------------------------------------------------------


def diff_to_json(diff: Diff) -> dict:
    """Convert a diff to a structured dict for JSON serialisation.

    Args:
        diff: The computed diff.

    Returns:
        Dict with counts and the list of operations.
    """
    return {
        "empty": diff.is_empty(),
        "counts": {
            "added": diff.count_added(),
            "deleted": diff.count_deleted(),
            "unchanged": diff.lcs_length(),
        },
        "edits": [edit.model_dump(exclude_none=True) for edit in diff.edits],
    }


def merge_to_json(merge: ThreeWayMerge) -> dict:
    """Convert a merge result to a structured dict for JSON serialisation.

    Args:
        merge: The completed merge.

    Returns:
        Dict with conflict count and per-block details.
    """
    blocks = []
    for edit in merge.edits:
        entry: dict = {"kind": edit.kind, "orig": list(edit.orig)}
        match edit:
            case ThreeWayCopy() | Stable():
                entry["lines"] = list(edit.lines)
            case Conflict():
                entry["final1"] = list(edit.final1)
                entry["final2"] = list(edit.final2)
        blocks.append(entry)

    return {
        "clean": merge.is_clean,
        "conflict_count": merge.conflict_count,
        "blocks": blocks,
    }
