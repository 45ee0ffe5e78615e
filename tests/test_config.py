"""Tests for RunThatConfig."""

from pathlib import Path

from run_that import RunThatConfig
from run_that.config import HOME_ENV_VAR


def test_default_paths(monkeypatch):
    """Defaults live under ~/.run-that."""
    monkeypatch.delenv(HOME_ENV_VAR, raising=False)

    config = RunThatConfig.from_env()

    assert config.home == Path.home() / ".run-that"
    assert config.repos_path == Path.home() / ".run-that" / "repos"
    assert config.lock_path == Path.home() / ".run-that" / "packages.lock"


def test_env_override(monkeypatch, tmp_path):
    """RUN_THAT_HOME redirects every path."""
    monkeypatch.setenv(HOME_ENV_VAR, str(tmp_path))

    config = RunThatConfig.from_env()

    assert config.home == tmp_path
    assert config.repos_path == tmp_path / "repos"


def test_explicit_home():
    """Paths can be injected directly, without touching the environment."""
    config = RunThatConfig(home=Path("/srv/run-that"))

    assert config.repos_path == Path("/srv/run-that/repos")
