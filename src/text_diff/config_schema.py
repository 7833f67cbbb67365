"""Unified configuration schema for text_diff.

Defines Pydantic models for the unified config structure with dedicated
sections for the diff engine, rendering, merging and logging.  Includes an
adapter function producing the flat ``Settings`` dataclass.

Usage:
    from text_diff.config_schema import UnifiedConfig, build_config, to_settings

    raw = load_hierarchical_config()
    unified = build_config(raw)
    settings = to_settings(unified, overrides={"engine": "native"})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from .config import Settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class EngineConfig(BaseModel):
    """Diff engine selection."""

    name: str = Field(
        default="auto",
        description="Engine name: auto, native, rapidfuzz or xdiff",
    )

    model_config = {"frozen": True}


class RenderConfig(BaseModel):
    """Renderer defaults shared by every output format.

    Attributes:
        leading_context_lines: Unchanged lines shown before a change.
        trailing_context_lines: Unchanged lines shown after a change.
        ins_prefix: Inline marker opening an insertion.
        ins_suffix: Inline marker closing an insertion.
        del_prefix: Inline marker opening a deletion.
        del_suffix: Inline marker closing a deletion.
        split_characters: Inline re-diff down to single characters.
    """

    leading_context_lines: int = Field(default=4, ge=0)
    trailing_context_lines: int = Field(default=4, ge=0)
    ins_prefix: str = "<ins>"
    ins_suffix: str = "</ins>"
    del_prefix: str = "<del>"
    del_suffix: str = "</del>"
    split_characters: bool = False

    model_config = {"frozen": True}


class MergeConfig(BaseModel):
    """Conflict markers and side labels for three-way merge output."""

    start_marker: str = "<<<<<<<"
    mid_marker: str = "======="
    end_marker: str = ">>>>>>>"
    label1: str | None = None
    label2: str | None = None

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional log file path.
    """

    level: str = Field(default="INFO", description="Log level")
    file: str | None = Field(default=None, description="Log file path")

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Top-level unified config
# ---------------------------------------------------------------------------


class UnifiedConfig(BaseModel):
    """Top-level unified configuration.

    Aggregates all config sections. Every section has sensible defaults,
    so ``UnifiedConfig()`` (zero-config) is always valid.
    """

    engine: EngineConfig = Field(default_factory=EngineConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    merge: MergeConfig = Field(default_factory=MergeConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Factory function
# ---------------------------------------------------------------------------


def build_config(raw_data: dict) -> UnifiedConfig:
    """Construct a ``UnifiedConfig`` from the raw dict returned by
    ``load_hierarchical_config()``.

    Handles missing sections gracefully; anything absent gets defaults.
    """
    if not raw_data:
        return UnifiedConfig()

    return UnifiedConfig(**raw_data)


# ---------------------------------------------------------------------------
# Adapter: UnifiedConfig -> Settings dataclass
# ---------------------------------------------------------------------------


def to_settings(
    unified: UnifiedConfig,
    overrides: dict | None = None,
) -> Settings:
    """Convert a ``UnifiedConfig`` into the flat ``Settings`` dataclass,
    applying explicit overrides on top.

    The precedence applied here is:
        override > unified config value

    Override keys: engine, leading_context_lines, trailing_context_lines.

    Returns:
        ``Settings`` instance (NOT validated; caller should run
        ``validate_settings()`` separately if needed).
    """
    # Import here to avoid circular imports (config.py imports config_schema)
    from .config import Settings

    overrides = overrides or {}

    def _pick(key: str, default):
        value = overrides.get(key)
        return default if value is None else value

    return Settings(
        engine=_pick("engine", unified.engine.name),
        leading_context_lines=_pick(
            "leading_context_lines", unified.render.leading_context_lines
        ),
        trailing_context_lines=_pick(
            "trailing_context_lines", unified.render.trailing_context_lines
        ),
        ins_prefix=unified.render.ins_prefix,
        ins_suffix=unified.render.ins_suffix,
        del_prefix=unified.render.del_prefix,
        del_suffix=unified.render.del_suffix,
        split_characters=unified.render.split_characters,
        start_marker=unified.merge.start_marker,
        mid_marker=unified.merge.mid_marker,
        end_marker=unified.merge.end_marker,
        label1=unified.merge.label1,
        label2=unified.merge.label2,
        log_level=unified.logging.level,
        log_file=unified.logging.file,
    )
