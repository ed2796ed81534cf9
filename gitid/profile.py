"""Profile model and the persisted profile store."""

import logging
import re
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Any, Iterator

import tomlkit
from tomlkit.exceptions import TOMLKitError

from .exceptions import (
    DuplicateNameError,
    InvalidProfileError,
    NotFoundError,
    ParseError,
)
from .system_utils import atomic_write, read_text

logger = logging.getLogger(__name__)

STORE_VERSION = 1

# Names become part of an SSH Host pattern, so pattern characters are out
NAME_PATTERN = re.compile(r"[A-Za-z0-9._-]+")


class Platform(Enum):
    """Supported hosting platforms."""
    GITHUB = auto()
    GITLAB = auto()
    BOTH = auto()

    @classmethod
    def from_str(cls, value: str) -> "Platform":
        """Convert string to platform."""
        mapping = {
            "github": cls.GITHUB,
            "gitlab": cls.GITLAB,
            "both": cls.BOTH,
        }
        normalized = str(value).lower().strip()
        if normalized not in mapping:
            raise InvalidProfileError(
                f"Invalid platform: {value}. Must be 'github', 'gitlab', or 'both'"
            )
        return mapping[normalized]

    @property
    def default_host(self) -> str:
        if self is Platform.GITLAB:
            return "gitlab.com"
        return "github.com"

    @property
    def families(self) -> tuple[str, ...]:
        """Host families this platform covers."""
        if self is Platform.BOTH:
            return ("github", "gitlab")
        return (str(self),)

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class Profile:
    """A named Git identity."""
    name: str
    email: str
    platform: Platform
    ssh_key: str
    gpg_key: str | None = None
    host: str | None = None
    user_name: str | None = None

    def validate(self) -> None:
        """Raise InvalidProfileError if a field is missing or malformed."""
        if not self.name or not self.name.strip():
            raise InvalidProfileError("Profile name cannot be empty")
        if not NAME_PATTERN.fullmatch(self.name):
            raise InvalidProfileError(
                f"Profile name may only contain letters, digits, '.', '_' and '-': {self.name!r}",
                profile_name=self.name,
            )
        for field_name in ("email", "ssh_key", "gpg_key", "host", "user_name"):
            value = getattr(self, field_name)
            if value and ("\n" in value or "\r" in value):
                raise InvalidProfileError(
                    f"{field_name} cannot contain line breaks", profile_name=self.name
                )
        if not self.email or not self.email.strip():
            raise InvalidProfileError("Email cannot be empty", profile_name=self.name)
        if "@" not in self.email:
            raise InvalidProfileError(
                f"Invalid email address: {self.email}", profile_name=self.name
            )
        if not isinstance(self.platform, Platform):
            raise InvalidProfileError(
                f"Invalid platform: {self.platform}", profile_name=self.name
            )
        if not self.ssh_key or not self.ssh_key.strip():
            raise InvalidProfileError("SSH key path cannot be empty", profile_name=self.name)
        for field_name in ("gpg_key", "host", "user_name"):
            value = getattr(self, field_name)
            if value is not None and not value.strip():
                raise InvalidProfileError(
                    f"{field_name} cannot be blank when given", profile_name=self.name
                )
        if self.host and any(c.isspace() or c == '"' for c in self.host):
            raise InvalidProfileError(
                f"Host cannot contain whitespace or quotes: {self.host!r}", profile_name=self.name
            )
        if '"' in self.ssh_key:
            # Paths with spaces are written quoted to the SSH config
            raise InvalidProfileError(
                f"SSH key path cannot contain quotes: {self.ssh_key!r}", profile_name=self.name
            )

    @property
    def default_host(self) -> str:
        """Custom host when set, otherwise the platform's public host."""
        return self.host or self.platform.default_host

    @property
    def ssh_alias(self) -> str:
        """SSH Host alias written by ssh-sync, e.g. ``github-work``."""
        return f"{self.platform}-{self.name}"

    @property
    def git_user_name(self) -> str:
        return self.user_name or self.name

    def to_dict(self) -> dict[str, Any]:
        """Convert profile to dictionary for serialization."""
        data: dict[str, Any] = {
            "name": self.name,
            "email": self.email,
            "platform": str(self.platform),
            "ssh_key": self.ssh_key,
        }
        for key in ("gpg_key", "host", "user_name"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Profile":
        """Create profile from dictionary."""
        for key in ("name", "email", "platform", "ssh_key"):
            if key not in data:
                raise InvalidProfileError(f"Missing field '{key}'", profile_name=data.get("name"))
        for key in ("name", "email", "platform", "ssh_key", "gpg_key", "host", "user_name"):
            if key in data and not isinstance(data[key], str):
                raise InvalidProfileError(
                    f"Field '{key}' must be a string", profile_name=data.get("name")
                )
        profile = cls(
            name=data["name"],
            email=data["email"],
            platform=Platform.from_str(data["platform"]),
            ssh_key=data["ssh_key"],
            gpg_key=data.get("gpg_key"),
            host=data.get("host"),
            user_name=data.get("user_name"),
        )
        profile.validate()
        return profile


class ProfileStore:
    """Ordered set of profiles backed by a TOML file."""

    def __init__(self, path: Path, profiles: list[Profile] | None = None) -> None:
        self.path = path
        self._profiles: list[Profile] = []
        for profile in profiles or []:
            self.add(profile)

    @classmethod
    def load(cls, path: Path) -> "ProfileStore":
        """Load the store from disk."""
        text = read_text(path)
        if text is None:
            raise NotFoundError(f"No gitid configuration found at {path}")

        try:
            data = tomlkit.parse(text).unwrap()
        except TOMLKitError as e:
            raise ParseError(f"Failed to parse {path}", details=str(e)) from e

        entries = data.get("profiles", [])
        if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
            raise ParseError(f"Failed to parse {path}", details="'profiles' must be an array of tables")

        store = cls(path)
        for index, entry in enumerate(entries, start=1):
            try:
                store.add(Profile.from_dict(entry))
            except (InvalidProfileError, DuplicateNameError) as e:
                raise ParseError(
                    f"Failed to parse {path}", details=f"profile #{index}: {e}"
                ) from e

        logger.debug(f"Loaded {len(store)} profile(s) from {path}")
        return store

    @classmethod
    def init(cls, path: Path) -> tuple["ProfileStore", bool]:
        """Create an empty store file unless one already exists.

        Returns:
            Tuple of (store, created)
        """
        if path.exists():
            return cls.load(path), False
        store = cls(path)
        store.save()
        return store, True

    def save(self) -> None:
        """Atomically rewrite the backing file."""
        doc = tomlkit.document()
        doc.add("version", STORE_VERSION)
        if self._profiles:
            profiles = tomlkit.aot()
            for profile in self._profiles:
                table = tomlkit.table()
                for key, value in profile.to_dict().items():
                    table.add(key, value)
                profiles.append(table)
            doc.add("profiles", profiles)
        atomic_write(self.path, tomlkit.dumps(doc))
        logger.debug(f"Saved {len(self._profiles)} profile(s) to {self.path}")

    def add(self, profile: Profile) -> None:
        """Append a profile after validating it and checking its name is free."""
        profile.validate()
        if profile.name in self:
            raise DuplicateNameError(
                f"Profile '{profile.name}' already exists", profile_name=profile.name
            )
        self._profiles.append(profile)

    def remove(self, name: str) -> Profile:
        """Remove and return the named profile."""
        profile = self.get(name)
        self._profiles.remove(profile)
        return profile

    def get(self, name: str) -> Profile:
        for profile in self._profiles:
            if profile.name == name:
                return profile
        raise NotFoundError(f"Profile not found: {name}")

    def names(self) -> list[str]:
        return [p.name for p in self._profiles]

    def __contains__(self, name: object) -> bool:
        return any(p.name == name for p in self._profiles)

    def __iter__(self) -> Iterator[Profile]:
        return iter(list(self._profiles))

    def __len__(self) -> int:
        return len(self._profiles)
