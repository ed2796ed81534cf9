"""Global and repository-local profile selections."""

import logging
from dataclasses import dataclass
from pathlib import Path

import git

from .exceptions import StaleSelectionError
from .git import GLOBAL, LOCAL
from .profile import Profile, ProfileStore
from .system_utils import atomic_write, read_text

logger = logging.getLogger(__name__)

CONFIG_SECTION = "gitid"
CONFIG_OPTION = "profile"


@dataclass(frozen=True)
class Selection:
    profile: Profile
    scope: str


class GlobalSelection:
    """Selected profile name kept in a one-line file in the config directory."""

    scope = GLOBAL

    def __init__(self, path: Path) -> None:
        self.path = path

    def get(self) -> str | None:
        text = read_text(self.path)
        if text is None:
            return None
        return text.strip() or None

    def set(self, name: str) -> None:
        atomic_write(self.path, f"{name}\n", mode=0o644)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class LocalSelection:
    """Selected profile name kept as ``gitid.profile`` in the repository's .git/config."""

    scope = LOCAL

    def __init__(self, repo: git.Repo) -> None:
        self.repo = repo

    def get(self) -> str | None:
        reader = self.repo.config_reader("repository")
        if not reader.has_option(CONFIG_SECTION, CONFIG_OPTION):
            return None
        # get() keeps the raw string; get_value() would turn "true" into a bool
        return reader.get(CONFIG_SECTION, CONFIG_OPTION).strip() or None

    def set(self, name: str) -> None:
        with self.repo.config_writer("repository") as writer:
            writer.set_value(CONFIG_SECTION, CONFIG_OPTION, name)

    def clear(self) -> None:
        with self.repo.config_writer("repository") as writer:
            if writer.has_option(CONFIG_SECTION, CONFIG_OPTION):
                writer.remove_option(CONFIG_SECTION, CONFIG_OPTION)
            if writer.has_section(CONFIG_SECTION):
                # GitPython reports its internal "__name__" key as an option
                remaining = [o for o in writer.options(CONFIG_SECTION) if o != "__name__"]
                if not remaining:
                    writer.remove_section(CONFIG_SECTION)


def resolve_selection(
    global_value: str | None,
    local_value: str | None,
    store: ProfileStore,
) -> Selection | None:
    """Resolve the current profile: local wins over global.

    Raises:
        StaleSelectionError: if the winning selection names a missing profile
    """
    for scope, name in ((LOCAL, local_value), (GLOBAL, global_value)):
        if not name:
            continue
        if name not in store:
            raise StaleSelectionError(name, scope)
        logger.debug(f"Current profile {name} ({scope})")
        return Selection(profile=store.get(name), scope=scope)
    return None
