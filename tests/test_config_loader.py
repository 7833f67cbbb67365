"""Tests for text_diff.config_loader: discovering and merging config files."""

import textwrap
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from text_diff.config import load_settings
from text_diff.config_loader import (
    CONFIG_SECTIONS,
    discover_config_files,
    ensure_config,
    expand_env_refs,
    load_hierarchical_config,
    resolve_config_path,
)
from text_diff.errors import ConfigurationError


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(text))
    return path


@pytest.fixture
def project_config(isolated_home):
    return isolated_home / ".text_diff" / "config.yml"


@pytest.fixture
def global_config(isolated_home):
    return isolated_home / "fakehome" / ".config" / "text_diff" / "config.yml"


class TestExpandEnvRefs:
    """${VAR} references in option values."""

    def test_marker_from_env(self, monkeypatch):
        monkeypatch.setenv("MERGE_START", "<<<<")
        assert expand_env_refs("${MERGE_START}") == "<<<<"

    def test_default_label(self, monkeypatch):
        monkeypatch.delenv("MERGE_LABEL", raising=False)
        assert expand_env_refs("${MERGE_LABEL:-theirs}") == "theirs"

    def test_empty_var_uses_default(self, monkeypatch):
        monkeypatch.setenv("MERGE_LABEL", "")
        assert expand_env_refs("${MERGE_LABEL:-theirs}") == "theirs"

    def test_unset_without_default_is_empty(self, monkeypatch):
        monkeypatch.delenv("MERGE_LABEL", raising=False)
        assert expand_env_refs("[${MERGE_LABEL}]") == "[]"

    def test_unclosed_reference_kept(self):
        assert expand_env_refs("<ins ${class") == "<ins ${class"


class TestDiscoverConfigFiles:
    """Which files apply, most specific first."""

    def test_env_file_first(self, isolated_home, project_config, monkeypatch):
        custom = _write(isolated_home / "ci.yml", "engine:\n  name: native\n")
        _write(project_config, "engine:\n  name: auto\n")
        monkeypatch.setenv("TEXT_DIFF_CONFIG", str(custom))

        assert discover_config_files() == [
            custom.resolve(),
            project_config.resolve(),
        ]

    def test_project_before_global(self, project_config, global_config):
        _write(project_config, "render: {}\n")
        _write(global_config, "render: {}\n")

        result = discover_config_files()
        assert result.index(project_config.resolve()) < result.index(global_config)

    def test_yaml_extension(self, isolated_home):
        alt = _write(isolated_home / ".text_diff" / "config.yaml", "merge: {}\n")
        assert alt.resolve() in discover_config_files()

    def test_missing_env_file_warns(self, isolated_home, monkeypatch, caplog):
        monkeypatch.setenv("TEXT_DIFF_CONFIG", str(isolated_home / "nope.yml"))

        assert discover_config_files() == []
        assert "missing file" in caplog.text

    def test_nothing_found(self, isolated_home):
        assert discover_config_files() == []


class TestLoadHierarchicalConfig:
    """Section-aware merging of the discovered files."""

    def test_sections_are_the_schema_sections(self):
        assert CONFIG_SECTIONS == ("engine", "render", "merge", "logging")

    def test_project_overrides_single_options(self, project_config, global_config):
        _write(
            global_config,
            """\
            render:
              leading_context_lines: 2
              trailing_context_lines: 2
            merge:
              label1: global
            """,
        )
        _write(
            project_config,
            """\
            render:
              leading_context_lines: 6
            """,
        )

        result = load_hierarchical_config()
        assert result["render"] == {
            "leading_context_lines": 6,
            "trailing_context_lines": 2,
        }
        assert result["merge"] == {"label1": "global"}

    def test_unknown_section_dropped_with_warning(self, project_config, caplog):
        _write(
            project_config,
            """\
            engine:
              name: native
            renderer:
              leading_context_lines: 1
            """,
        )

        assert load_hierarchical_config() == {"engine": {"name": "native"}}
        assert "Unknown config section 'renderer'" in caplog.text

    def test_empty_section_ignored(self, project_config):
        _write(project_config, "merge:\nengine:\n  name: native\n")
        assert load_hierarchical_config() == {"engine": {"name": "native"}}

    def test_non_mapping_section_raises(self, project_config):
        _write(project_config, "render: 3\n")
        with pytest.raises(ConfigurationError, match="'render'"):
            load_hierarchical_config()

    def test_env_refs_expanded(self, project_config, monkeypatch):
        monkeypatch.setenv("REVIEWER", "alice")
        _write(
            project_config,
            """\
            merge:
              label2: "${REVIEWER}"
              label1: "${AUTHOR:-mine}"
            render:
              leading_context_lines: 3
            """,
        )

        result = load_hierarchical_config()
        assert result["merge"] == {"label2": "alice", "label1": "mine"}
        assert result["render"] == {"leading_context_lines": 3}

    def test_list_root_ignored(self, isolated_home, monkeypatch, caplog):
        custom = _write(isolated_home / "bad.yml", "- native\n- rapidfuzz\n")
        monkeypatch.setenv("TEXT_DIFF_CONFIG", str(custom))

        assert load_hierarchical_config() == {}
        assert "list" in caplog.text

    def test_invalid_yaml_propagates(self, isolated_home, monkeypatch):
        custom = _write(isolated_home / "broken.yml", "engine: [unclosed\n")
        monkeypatch.setenv("TEXT_DIFF_CONFIG", str(custom))

        with pytest.raises(yaml.YAMLError):
            load_hierarchical_config()

    def test_zero_config(self, isolated_home):
        assert load_hierarchical_config() == {}

    def test_merged_files_feed_settings(self, project_config, global_config):
        _write(global_config, "merge:\n  label1: mine\n  label2: theirs\n")
        _write(project_config, "merge:\n  label2: upstream\n")

        settings = load_settings(yaml_fallbacks=load_hierarchical_config())
        assert (settings.label1, settings.label2) == ("mine", "upstream")


class TestResolveConfigPath:
    """resolve_config_path()."""

    def test_most_specific_existing(self):
        project_path = Path("/project/.text_diff/config.yml")
        global_path = Path("/home/user/.config/text_diff/config.yml")

        with patch(
            "text_diff.config_loader.discover_config_files",
            return_value=[project_path, global_path],
        ):
            assert resolve_config_path() == project_path

    def test_project_default(self, isolated_home):
        expected = isolated_home / ".text_diff" / "config.yml"
        assert resolve_config_path().resolve() == expected.resolve()


class TestEnsureConfig:
    """ensure_config()."""

    def test_existing_file_kept(self, project_config):
        _write(project_config, "engine:\n  name: native\n")

        assert ensure_config() == project_config.resolve()
        assert project_config.read_text() == "engine:\n  name: native\n"

    def test_writes_starter(self, isolated_home):
        target = isolated_home / "custom" / "config.yml"

        assert ensure_config(target=target) == target
        content = target.read_text()
        assert content.startswith("# text_diff configuration")
        for section in CONFIG_SECTIONS:
            assert f"# {section}:" in content

    def test_starter_file_is_zero_config(self, isolated_home):
        path = ensure_config()

        assert path.resolve() == (isolated_home / ".text_diff" / "config.yml").resolve()
        assert load_hierarchical_config() == {}
