"""Shared pytest fixtures for text-diff-engine tests."""

import pytest
from dotenv import load_dotenv

from text_diff.config import Settings
from text_diff.render.colors import AnsiColorizer

load_dotenv()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep developer settings from leaking into tests."""
    for var in (
        "TEXT_DIFF_ENGINE",
        "TEXT_DIFF_CONTEXT_LINES",
        "TEXT_DIFF_CONFIG",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Run with an empty CWD and a fake HOME, so no config files are found."""
    monkeypatch.chdir(tmp_path)
    fake_home = tmp_path / "fakehome"
    monkeypatch.setenv("HOME", str(fake_home))
    return tmp_path


@pytest.fixture
def default_settings():
    """Settings with every field at its default."""
    return Settings()


@pytest.fixture
def plain_colorizer():
    """Colorizer that records nothing and emits no escape codes."""
    return AnsiColorizer(enabled=False)


@pytest.fixture
def origin_lines():
    return ["alpha", "beta", "gamma", "delta", "epsilon"]
