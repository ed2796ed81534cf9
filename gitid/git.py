"""Git repository access and identity application."""

import logging
from pathlib import Path

import git
from git.config import GitConfigParser, get_config_path

from .exceptions import GitidError, NotFoundError
from .profile import Profile

logger = logging.getLogger(__name__)

LOCAL = "local"
GLOBAL = "global"


def open_repo(path: Path | None = None) -> git.Repo:
    """Open the repository containing ``path`` (default: the working directory)."""
    try:
        return git.Repo(path or Path.cwd(), search_parent_directories=True)
    except (git.InvalidGitRepositoryError, git.NoSuchPathError) as e:
        raise NotFoundError(
            "Not in a git repository",
            details="Use --global to apply a profile outside a repository",
        ) from e


def find_repo(path: Path | None = None) -> git.Repo | None:
    """Like open_repo, but None outside a repository."""
    try:
        return open_repo(path)
    except NotFoundError:
        return None


def get_remote_url(repo: git.Repo, remote: str | None = None) -> str:
    """URL of ``remote``, or of origin, or of the first remote."""
    remotes = {r.name: r for r in repo.remotes}
    if remote is not None:
        if remote not in remotes:
            raise NotFoundError(f"Remote not found: {remote}")
        chosen = remotes[remote]
    elif "origin" in remotes:
        chosen = remotes["origin"]
    elif remotes:
        chosen = next(iter(remotes.values()))
    else:
        raise NotFoundError("Repository has no remotes", details=repo.working_dir)

    try:
        url = chosen.url
    except AttributeError as e:
        raise NotFoundError(f"Remote '{chosen.name}' has no URL") from e
    logger.debug(f"Remote {chosen.name}: {url}")
    return url


def _config_writer(scope: str, repo: git.Repo | None) -> GitConfigParser:
    if scope == LOCAL:
        if repo is None:
            raise NotFoundError("Not in a git repository")
        return repo.config_writer("repository")
    return GitConfigParser(get_config_path("global"), read_only=False)


def apply_identity(profile: Profile, scope: str, repo: git.Repo | None = None) -> None:
    """Write the profile's committer identity to git config."""
    try:
        with _config_writer(scope, repo) as writer:
            writer.set_value("user", "name", profile.git_user_name)
            writer.set_value("user", "email", profile.email)
            if profile.gpg_key:
                writer.set_value("user", "signingkey", profile.gpg_key)
                writer.set_value("commit", "gpgsign", "true")
            else:
                if writer.has_option("user", "signingkey"):
                    writer.remove_option("user", "signingkey")
                if writer.has_option("commit", "gpgsign"):
                    writer.remove_option("commit", "gpgsign")
    except OSError as e:
        raise GitidError(f"Failed to write {scope} git config", details=str(e)) from e
    logger.debug(f"Applied profile {profile.name} to {scope} git config")


def current_identity(repo: git.Repo | None = None) -> tuple[str | None, str | None]:
    """Effective (user.name, user.email) as git resolves them."""
    if repo is not None:
        reader = repo.config_reader()
    else:
        reader = GitConfigParser(get_config_path("global"), read_only=True)
    name = reader.get("user", "name") if reader.has_option("user", "name") else None
    email = reader.get("user", "email") if reader.has_option("user", "email") else None
    return name, email
