"""Test configuration and fixtures."""

from collections.abc import Callable
from pathlib import Path

import git
import pytest

from gitid.profile import Platform, Profile, ProfileStore


@pytest.fixture
def temp_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary home directory and point gitid and git at it."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GITID_HOME", str(home))
    monkeypatch.delenv("GITID_CONFIG_DIR", raising=False)
    monkeypatch.delenv("GITID_SSH_CONFIG", raising=False)
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("COLUMNS", "200")
    monkeypatch.chdir(home)
    return home


@pytest.fixture
def config_dir(temp_home: Path) -> Path:
    return temp_home / ".config" / "gitid"


@pytest.fixture
def ssh_config(temp_home: Path) -> Path:
    return temp_home / ".ssh" / "config"


@pytest.fixture
def make_profile() -> Callable[..., Profile]:
    """Build a valid profile, overriding any field by keyword."""
    def factory(name: str = "work", platform: Platform = Platform.GITHUB, **kwargs) -> Profile:
        fields = {
            "email": f"{name}@example.com",
            "ssh_key": f"~/.ssh/id_{name}",
        }
        fields.update(kwargs)
        return Profile(name=name, platform=platform, **fields)
    return factory


@pytest.fixture
def store(config_dir: Path) -> ProfileStore:
    """An initialised, empty profile store."""
    store, _ = ProfileStore.init(config_dir / "config.toml")
    return store


@pytest.fixture
def git_repo(temp_home: Path, monkeypatch: pytest.MonkeyPatch) -> git.Repo:
    """A fresh repository that is also the working directory."""
    path = temp_home / "repo"
    repo = git.Repo.init(path)
    monkeypatch.chdir(path)
    return repo
