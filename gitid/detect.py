"""Remote URL parsing and profile auto-detection."""

import logging
import re
from dataclasses import dataclass, field

from .exceptions import NoMatchError, ParseError
from .profile import Profile, ProfileStore

logger = logging.getLogger(__name__)

ALIAS_SCORE = 100
HOST_SCORE = 50
PLATFORM_SCORE = 10

_SCHEME_URL = re.compile(r"^(?P<scheme>[a-z][a-z0-9+.-]*)://(?P<netloc>[^/]*)(?P<path>/.*)?$", re.IGNORECASE)
_SCP_URL = re.compile(r"^(?:(?P<user>[^@/:]+)@)?(?P<host>[^@/:]+):(?P<path>.+)$")
_HOST_LABELS = re.compile(r"[.\-]")


@dataclass(frozen=True)
class RemoteUrl:
    """The parts of a Git remote URL detection cares about."""
    raw: str
    host: str
    scheme: str = "ssh"
    user: str | None = None
    port: int | None = None
    path: str = ""

    @property
    def owner(self) -> str | None:
        parts = self.path.split("/")
        return parts[0] if len(parts) > 1 and parts[0] else None

    @property
    def repo(self) -> str | None:
        name = self.path.rsplit("/", 1)[-1]
        return name or None

    @classmethod
    def parse(cls, url: str) -> "RemoteUrl":
        """Parse an SSH, scp-like or HTTP(S) remote URL.

        Raises:
            ParseError: if no host can be extracted
        """
        url = url.strip()
        match = _SCHEME_URL.match(url)
        if match:
            scheme = match.group("scheme").lower()
            user, host, port = _split_netloc(match.group("netloc"))
            path = match.group("path") or ""
        else:
            match = _SCP_URL.match(url)
            if not match:
                raise ParseError(f"Unrecognised remote URL: {url!r}")
            scheme = "ssh"
            user, host, port = match.group("user"), match.group("host"), None
            path = match.group("path")

        if not host:
            raise ParseError(f"Remote URL has no host: {url!r}")

        path = path.strip("/")
        if path.endswith(".git"):
            path = path[: -len(".git")]
        return cls(raw=url, host=host, scheme=scheme, user=user, port=port, path=path.rstrip("/"))


def _split_netloc(netloc: str) -> tuple[str | None, str, int | None]:
    user = None
    if "@" in netloc:
        user, netloc = netloc.rsplit("@", 1)
        user = user.split(":", 1)[0] or None
    port = None
    if netloc.startswith("["):
        host, _, rest = netloc[1:].partition("]")
        if rest.startswith(":") and rest[1:].isdigit():
            port = int(rest[1:])
        return user, host, port
    host, sep, port_str = netloc.partition(":")
    if sep:
        if not port_str.isdigit():
            raise ParseError(f"Invalid port in remote URL host: {netloc!r}")
        port = int(port_str)
    return user, host, port


def host_families(host: str) -> set[str]:
    """Platform families a host belongs to, judged by its labels.

    ``github.com``, ``api.github.com`` and the ``github-work`` alias are all
    GitHub-family; ``gitlab.example.org`` is GitLab-family.
    """
    labels = set(_HOST_LABELS.split(host.lower()))
    return {family for family in ("github", "gitlab") if family in labels}


@dataclass(frozen=True)
class ProfileMatch:
    """Score breakdown for one profile."""
    name: str
    score: int
    signals: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class DetectionResult:
    profile: Profile
    url: RemoteUrl
    matches: tuple[ProfileMatch, ...]


def score_profile(url: RemoteUrl, profile: Profile) -> ProfileMatch:
    """Sum the evidence that a remote belongs to a profile."""
    score = 0
    signals = []

    if url.host == profile.ssh_alias:
        score += ALIAS_SCORE
        signals.append("alias")

    if profile.host and url.host.lower() == profile.host.lower():
        score += HOST_SCORE
        signals.append("host")

    if host_families(url.host) & set(profile.platform.families):
        score += PLATFORM_SCORE
        signals.append("platform")

    return ProfileMatch(name=profile.name, score=score, signals=tuple(signals))


def detect_profile(store: ProfileStore, remote_url: str | RemoteUrl) -> DetectionResult:
    """Pick the best profile for a remote URL.

    Every profile is scored; ties on the top score go to the profile that was
    added first.

    Raises:
        ParseError: if the URL cannot be parsed
        NoMatchError: if no profile scores above zero
    """
    url = remote_url if isinstance(remote_url, RemoteUrl) else RemoteUrl.parse(remote_url)
    profiles = list(store)

    scored = [(score_profile(url, p), p) for p in profiles]
    # sorted() is stable, so equal scores keep store order
    ranked = sorted(
        (item for item in scored if item[0].score > 0),
        key=lambda item: item[0].score,
        reverse=True,
    )
    for match, _ in ranked:
        logger.debug(f"{match.name}: {match.score} ({', '.join(match.signals)})")

    if not ranked:
        raise NoMatchError(
            f"No profile matches remote host '{url.host}'",
            details=f"Remote: {url.raw}",
        )

    return DetectionResult(
        profile=ranked[0][1],
        url=url,
        matches=tuple(match for match, _ in ranked),
    )
