"""
YAML config file discovery and merging for text_diff.

A config file holds up to four sections, ``engine``, ``render``, ``merge``
and ``logging``, each a flat mapping of scalar options (see
``config_schema``).  Several files may apply at once; they are merged option
by option, the more specific file winning.  String options may reference
environment variables as ``${VAR}`` or ``${VAR:-default}``.

Usage:
    from text_diff.config_loader import load_hierarchical_config

    config = load_hierarchical_config()
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

from .config_schema import UnifiedConfig
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "TEXT_DIFF_CONFIG"
CONFIG_DIR_NAME = ".text_diff"
CONFIG_SECTIONS = tuple(UnifiedConfig.model_fields)

_ENV_REF = re.compile(r"\$\{(?P<name>[^}:]+)(?::-(?P<default>[^}]*))?\}")


def expand_env_refs(value: str) -> str:
    """Substitute ``${VAR}`` / ``${VAR:-default}`` references in *value*.

    An unset or empty variable expands to its default, or to ``""`` when no
    default is given.  Text without a closing brace is kept as written.
    """
    return _ENV_REF.sub(
        lambda m: os.environ.get(m["name"]) or m["default"] or "", value
    )


def discover_config_files() -> list[Path]:
    """Return existing config files, most specific first.

    Candidates:
        1. the file named by ``TEXT_DIFF_CONFIG``
        2. ``./.text_diff/config.yml`` then ``./.text_diff/config.yaml``
        3. ``~/.config/text_diff/config.yml``
    """
    candidates: list[Path] = []

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        explicit = Path(env_path).expanduser().resolve()
        if not explicit.exists():
            logger.warning(
                "%s points to a missing file: %s", CONFIG_ENV_VAR, explicit
            )
        candidates.append(explicit)

    project_dir = Path.cwd() / CONFIG_DIR_NAME
    candidates += [project_dir / "config.yml", project_dir / "config.yaml"]
    candidates.append(Path.home() / ".config" / "text_diff" / "config.yml")

    return [p for p in candidates if p.exists()]


def _read_sections(path: Path) -> dict[str, dict[str, Any]]:
    """Load *path* and keep only the recognised sections.

    Raises:
        ConfigurationError: If a recognised section is not a mapping.
    """
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning(
            "Config file %s has a %s at its root instead of sections, ignoring it",
            path,
            type(data).__name__,
        )
        return {}

    sections: dict[str, dict[str, Any]] = {}
    for name, options in data.items():
        if name not in CONFIG_SECTIONS:
            logger.warning(
                "Unknown config section '%s' in %s (known: %s)",
                name,
                path,
                ", ".join(CONFIG_SECTIONS),
            )
            continue
        if options is None:
            continue
        if not isinstance(options, dict):
            raise ConfigurationError(
                f"Config section '{name}' in {path} must be a mapping, "
                f"got {type(options).__name__}"
            )
        sections[name] = {
            key: expand_env_refs(value) if isinstance(value, str) else value
            for key, value in options.items()
        }
    return sections


def load_hierarchical_config() -> dict[str, Any]:
    """Merge every discovered config file into one section dict.

    Files are applied from the global one to the most specific one, so a
    project file overrides single options of a section and inherits the rest.
    Returns an empty dict when no config file exists.
    """
    paths = discover_config_files()
    if not paths:
        logger.debug("No config files found, using built-in defaults")
        return {}

    merged: dict[str, dict[str, Any]] = {}
    for path in reversed(paths):
        logger.debug("Loading config: %s", path)
        for name, options in _read_sections(path).items():
            merged.setdefault(name, {}).update(options)
    return merged


_STARTER_CONFIG = """\
# text_diff configuration
#
# Environment variables take precedence over this file:
#   TEXT_DIFF_ENGINE, TEXT_DIFF_CONTEXT_LINES, LOG_LEVEL
# String values may use ${VAR} or ${VAR:-default}.
#
# engine:
#   name: auto            # auto | native | rapidfuzz | xdiff
#
# render:
#   leading_context_lines: 4
#   trailing_context_lines: 4
#   ins_prefix: "<ins>"
#   ins_suffix: "</ins>"
#   del_prefix: "<del>"
#   del_suffix: "</del>"
#   split_characters: false
#
# merge:
#   start_marker: "<<<<<<<"
#   mid_marker: "======="
#   end_marker: ">>>>>>>"
#   label1: mine
#   label2: theirs
#
# logging:
#   level: INFO
#   file: null
"""


def resolve_config_path() -> Path:
    """Return the most specific existing config file, else the project default."""
    existing = discover_config_files()
    if existing:
        return existing[0]
    return Path.cwd() / CONFIG_DIR_NAME / "config.yml"


def ensure_config(target: Path | None = None) -> Path:
    """Write a commented starter config unless a config file already exists.

    Returns the path of the existing or newly written file.
    """
    existing = discover_config_files()
    if existing:
        logger.debug("Config file already exists: %s", existing[0])
        return existing[0]

    config_path = target or resolve_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(_STARTER_CONFIG, encoding="utf-8")
    logger.info("Created starter config: %s", config_path)
    return config_path
