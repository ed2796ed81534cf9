"""SSH config synchronisation.

gitid owns a single region of the user's SSH config, delimited by
``MANAGED_START`` and ``MANAGED_END`` lines. Everything between them is
regenerated from the profile store on each sync; everything outside them is
left byte-for-byte as the user wrote it. Hand edits inside the region are
therefore lost on the next sync.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from .exceptions import ParseError
from .profile import Profile, ProfileStore
from .system_utils import atomic_write, read_text

logger = logging.getLogger(__name__)

MANAGED_START = "# === GITID MANAGED START ==="
MANAGED_END = "# === GITID MANAGED END ==="
PROFILE_MARKER = "# gitid: {name}"


@dataclass(frozen=True)
class SyncResult:
    """Outcome of an ssh-sync run."""
    path: Path
    aliases: tuple[tuple[str, str], ...]
    changed: bool
    appended: bool


def _quote(value: str) -> str:
    """Quote an ssh_config argument that contains whitespace."""
    if any(c.isspace() for c in value):
        return f'"{value}"'
    return value


def render_stanza(profile: Profile) -> str:
    """Render the Host block for one profile."""
    return (
        f"{PROFILE_MARKER.format(name=profile.name)}\n"
        f"Host {profile.ssh_alias}\n"
        f"  HostName {profile.default_host}\n"
        f"  User git\n"
        f"  IdentityFile {_quote(profile.ssh_key)}\n"
        f"  IdentitiesOnly yes\n"
    )


def render_managed_region(profiles: Iterable[Profile]) -> str:
    """Render the text that goes strictly between the two markers."""
    stanzas = [render_stanza(p) for p in profiles if p.ssh_key]
    return "\n".join(stanzas)


def _find_line(content: str, line: str, start: int = 0) -> re.Match | None:
    return re.compile(rf"^{re.escape(line)}[ \t]*\r?$", re.MULTILINE).search(content, start)


def _detect_newline(content: str) -> str:
    """Line ending of the first line, so appended text matches the file."""
    first = content.find("\n")
    if first > 0 and content[first - 1] == "\r":
        return "\r\n"
    return "\n"


def merge_managed_region(content: str, region: str) -> tuple[str, bool]:
    """Place ``region`` between the markers in ``content``.

    Returns:
        Tuple of (new content, appended) where appended is True when the file
        had no managed region yet.

    Raises:
        ParseError: if a start marker has no matching end marker
    """
    newline = _detect_newline(content)
    if newline != "\n":
        region = region.replace("\n", newline)

    start = _find_line(content, MANAGED_START)
    if start is not None:
        end = _find_line(content, MANAGED_END, start.end())
        if end is None:
            raise ParseError(
                "SSH config has a gitid start marker without an end marker",
                details=f"Add a line '{MANAGED_END}' or remove '{MANAGED_START}'",
            )
        # Interior runs from the line after the start marker up to the end marker
        interior_start = start.end() + 1
        return content[:interior_start] + region + content[end.start():], False

    if _find_line(content, MANAGED_END) is not None:
        raise ParseError(
            "SSH config has a gitid end marker without a start marker",
            details=f"Add a line '{MANAGED_START}' or remove '{MANAGED_END}'",
        )

    prefix = content
    if prefix:
        if not prefix.endswith("\n"):
            prefix += newline
        if not prefix.endswith(("\n\n", "\n\r\n")):
            prefix += newline
    return f"{prefix}{MANAGED_START}{newline}{region}{MANAGED_END}{newline}", True


def sync_ssh_config(store: ProfileStore, path: Path) -> SyncResult:
    """Bring the managed region of the SSH config at ``path`` up to date."""
    current = read_text(path)
    content = current or ""
    region = render_managed_region(store)
    merged, appended = merge_managed_region(content, region)

    changed = current is None or merged != current
    if changed:
        atomic_write(path, merged)
        logger.debug(f"Updated SSH config {path}")
    else:
        logger.debug(f"SSH config {path} already up to date")

    aliases = tuple((p.ssh_alias, p.default_host) for p in store if p.ssh_key)
    return SyncResult(path=path, aliases=aliases, changed=changed, appended=appended)
