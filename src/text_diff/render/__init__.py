"""Rendering edit scripts as text.

``Renderer`` groups an edit script into hunks; a ``DiffFormat`` strategy
turns each hunk into text.  ``create_renderer()`` builds a renderer for a
format name.
"""

from typing import Any

from text_diff.errors import ConfigurationError

from .base import DiffFormat, Hunk, Renderer
from .colors import AnsiColorizer, Colorizer
from .formats import ColoredUnifiedFormat, ContextFormat, NormalFormat, UnifiedFormat
from .inline import (
    NEWLINE_PLACEHOLDER,
    WHOLE_DOCUMENT,
    InlineFormat,
    split_characters,
    split_words,
)

_FORMAT_MAP: dict[str, type[DiffFormat]] = {
    "normal": NormalFormat,
    "unified": UnifiedFormat,
    "context": ContextFormat,
    "inline": InlineFormat,
    "colored": ColoredUnifiedFormat,
}


def create_renderer(
    name: str,
    leading_context_lines: int | None = None,
    trailing_context_lines: int | None = None,
    **format_params: Any,
) -> Renderer:
    """Create a renderer for a format name.

    Args:
        name: One of ``"normal"``, ``"unified"``, ``"context"``,
            ``"inline"`` or ``"colored"``.
        leading_context_lines: Overrides the format default.
        trailing_context_lines: Overrides the format default.
        **format_params: Passed to the format constructor (e.g.
            ``colorizer=`` for ``"colored"``, affixes for ``"inline"``).

    Raises:
        ConfigurationError: If the name is unknown or a required
            collaborator is missing.
    """
    cls = _FORMAT_MAP.get(name)
    if cls is None:
        raise ConfigurationError(
            f"Unknown diff format: '{name}'. Valid formats: {sorted(_FORMAT_MAP)}"
        )
    return Renderer(
        cls(**format_params),
        leading_context_lines=leading_context_lines,
        trailing_context_lines=trailing_context_lines,
    )


__all__ = [
    "NEWLINE_PLACEHOLDER",
    "WHOLE_DOCUMENT",
    "AnsiColorizer",
    "ColoredUnifiedFormat",
    "Colorizer",
    "ContextFormat",
    "DiffFormat",
    "Hunk",
    "InlineFormat",
    "NormalFormat",
    "Renderer",
    "UnifiedFormat",
    "create_renderer",
    "split_characters",
    "split_words",
]
