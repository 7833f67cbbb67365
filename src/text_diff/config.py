"""Runtime settings for text_diff.

Reads engine and renderer defaults from explicit arguments, environment
variables, .env files, and YAML config file fallbacks.

Precedence (highest to lowest):
    Explicit args > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    TEXT_DIFF_ENGINE: Diff engine name (optional, default: auto)
    TEXT_DIFF_CONTEXT_LINES: Leading and trailing context lines (optional, default: 4)
"""

import logging
import os
from dataclasses import dataclass
from typing import Any

from dotenv import load_dotenv

from .config_loader import load_hierarchical_config
from .config_schema import build_config, to_settings
from .diff.engines import resolve_engine_name
from .errors import ConfigurationError
from .logger import setup_logging
from .merge.three_way import ConflictMarkers, ThreeWayMerge
from .render import Renderer, create_renderer

logger = logging.getLogger(__name__)

MAX_CONTEXT_LINES = 10000


@dataclass
class Settings:
    engine: str = "auto"
    leading_context_lines: int = 4
    trailing_context_lines: int = 4
    ins_prefix: str = "<ins>"
    ins_suffix: str = "</ins>"
    del_prefix: str = "<del>"
    del_suffix: str = "</del>"
    split_characters: bool = False
    start_marker: str = "<<<<<<<"
    mid_marker: str = "======="
    end_marker: str = ">>>>>>>"
    label1: str | None = None
    label2: str | None = None
    log_level: str = "INFO"
    log_file: str | None = None

    def create_renderer(self, fmt: str = "unified", **format_params: Any) -> Renderer:
        """Build a renderer for *fmt* using these settings.

        The inline format always renders the whole document, so only its
        affixes are taken from the settings.  Keyword arguments override
        the settings (``colorizer=`` is required for ``"colored"``).
        """
        if fmt == "inline":
            params = {
                "ins_prefix": self.ins_prefix,
                "ins_suffix": self.ins_suffix,
                "del_prefix": self.del_prefix,
                "del_suffix": self.del_suffix,
                "split_characters": self.split_characters,
                "engine": self.engine,
            }
            params.update(format_params)
            return create_renderer(fmt, **params)
        return create_renderer(
            fmt,
            leading_context_lines=self.leading_context_lines,
            trailing_context_lines=self.trailing_context_lines,
            **format_params,
        )

    def conflict_markers(self) -> ConflictMarkers:
        return ConflictMarkers(
            start=self.start_marker, mid=self.mid_marker, end=self.end_marker
        )

    def merged_output(self, merge: ThreeWayMerge) -> list[str]:
        """Return *merge*'s lines using the configured markers and labels."""
        return merge.merged_output(
            label1=self.label1,
            label2=self.label2,
            markers=self.conflict_markers(),
        )

    def setup_logging(self, debug: bool = False, debug_format: str = "text") -> None:
        """Configure logging from the ``logging:`` config section."""
        setup_logging(
            debug=debug,
            log_file=self.log_file,
            debug_format=debug_format,
            level=self.log_level,
        )


def validate_settings(settings: Settings) -> None:
    """Validate settings values and raise ConfigurationError if invalid.

    Raises:
        ConfigurationError: If the engine name is unknown or not a computing
            engine, or a context line count is out of range.
    """
    settings.engine = settings.engine.strip().lower()

    # Raises UnknownEngine for unregistered names.
    resolved = resolve_engine_name(settings.engine)
    if resolved == "string":
        raise ConfigurationError(
            "The 'string' engine parses patches and cannot be the default engine"
        )

    for name in ("leading_context_lines", "trailing_context_lines"):
        value = getattr(settings, name)
        if not (0 <= value <= MAX_CONTEXT_LINES):
            raise ConfigurationError(
                f"Invalid {name} {value}: must be a number between 0 and {MAX_CONTEXT_LINES}"
            )

    for name in ("start_marker", "mid_marker", "end_marker"):
        if not getattr(settings, name):
            raise ConfigurationError(f"Conflict marker '{name}' cannot be empty")


def load_settings(
    engine: str | None = None,
    context_lines: int | None = None,
    yaml_fallbacks: dict | None = None,
) -> Settings:
    """Load settings with unified precedence.

    Resolution order for each field (highest to lowest):
        explicit arg > env var / .env > yaml_fallbacks > built-in default

    The caller is responsible for calling ``load_dotenv()`` before this
    function so that .env values are available via ``os.getenv()``.

    Args:
        engine: Override engine name.
        context_lines: Override both leading and trailing context counts.
        yaml_fallbacks: Raw dict from ``load_hierarchical_config()``.

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If an env var or the resulting settings are
            invalid.
    """
    unified = build_config(yaml_fallbacks or {})

    final_engine = engine or os.getenv("TEXT_DIFF_ENGINE") or None

    final_context = context_lines
    if final_context is None:
        context_raw = os.getenv("TEXT_DIFF_CONTEXT_LINES")
        if context_raw is not None:
            try:
                final_context = int(context_raw)
            except ValueError:
                raise ConfigurationError(
                    f"Invalid TEXT_DIFF_CONTEXT_LINES '{context_raw}': must be a number between 0 and {MAX_CONTEXT_LINES}"
                ) from None

    settings = to_settings(
        unified,
        overrides={
            "engine": final_engine,
            "leading_context_lines": final_context,
            "trailing_context_lines": final_context,
        },
    )

    validate_settings(settings)
    logger.debug(
        "Settings loaded: engine=%s context=%d/%d",
        settings.engine,
        settings.leading_context_lines,
        settings.trailing_context_lines,
    )

    return settings


def bootstrap_settings(
    engine: str | None = None,
    context_lines: int | None = None,
) -> Settings:
    """Load ``.env``, then the hierarchical YAML config, then ``load_settings()``."""
    load_dotenv()
    raw = load_hierarchical_config()
    return load_settings(
        engine=engine, context_lines=context_lines, yaml_fallbacks=raw
    )
