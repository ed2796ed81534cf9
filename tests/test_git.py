"""Tests for git config access."""

from pathlib import Path

import git
import pytest

from gitid.exceptions import NotFoundError
from gitid.git import GLOBAL, LOCAL, apply_identity, current_identity, find_repo, get_remote_url, open_repo


def test_apply_identity_local(git_repo: git.Repo, make_profile) -> None:
    """Test signing settings follow the profile's GPG key."""
    apply_identity(make_profile("work", gpg_key="ABCD1234", user_name="Work Me"), LOCAL, git_repo)

    reader = git_repo.config_reader("repository")
    assert reader.get_value("user", "name") == "Work Me"
    assert reader.get_value("user", "email") == "work@example.com"
    assert reader.get_value("user", "signingkey") == "ABCD1234"
    assert reader.get_value("commit", "gpgsign") is True

    apply_identity(make_profile("personal"), LOCAL, git_repo)

    reader = git_repo.config_reader("repository")
    assert reader.get_value("user", "email") == "personal@example.com"
    assert not reader.has_option("user", "signingkey")
    assert not reader.has_option("commit", "gpgsign")
    assert current_identity(git_repo) == ("personal", "personal@example.com")


def test_apply_identity_global(temp_home: Path, make_profile) -> None:
    assert current_identity() == (None, None)

    apply_identity(make_profile("work"), GLOBAL)

    assert "email = work@example.com" in (temp_home / ".gitconfig").read_text()
    assert current_identity() == ("work", "work@example.com")


def test_apply_identity_local_needs_repo(make_profile) -> None:
    with pytest.raises(NotFoundError):
        apply_identity(make_profile(), LOCAL, None)


def test_open_repo_from_subdirectory(git_repo: git.Repo) -> None:
    nested = Path(git_repo.working_dir) / "a" / "b"
    nested.mkdir(parents=True)
    assert Path(open_repo(nested).working_dir) == Path(git_repo.working_dir)


def test_open_repo_outside(temp_home: Path) -> None:
    with pytest.raises(NotFoundError, match="Not in a git repository"):
        open_repo(temp_home)
    assert find_repo(temp_home) is None


def test_get_remote_url(git_repo: git.Repo) -> None:
    """Test origin wins, then the first remote, unless one is named."""
    with pytest.raises(NotFoundError, match="no remotes"):
        get_remote_url(git_repo)

    git_repo.create_remote("upstream", "git@github.com:upstream/app.git")
    assert get_remote_url(git_repo) == "git@github.com:upstream/app.git"

    git_repo.create_remote("origin", "git@github-work:acme/app.git")
    assert get_remote_url(git_repo) == "git@github-work:acme/app.git"
    assert get_remote_url(git_repo, "upstream") == "git@github.com:upstream/app.git"

    with pytest.raises(NotFoundError, match="Remote not found: fork"):
        get_remote_url(git_repo, "fork")
