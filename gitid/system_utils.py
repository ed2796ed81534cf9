"""Filesystem locations and crash-safe file writes."""

import logging
import os
import tempfile
from pathlib import Path

from .exceptions import IOFailureError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.toml"
ACTIVE_FILENAME = "active"
LOG_FILENAME = "gitid.log"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_log_handler: logging.Handler | None = None


def get_home_dir() -> Path:
    """Get the home directory, honouring GITID_HOME."""
    override = os.environ.get("GITID_HOME")
    if override:
        return Path(override)
    return Path.home()


def get_config_dir() -> Path:
    """Get the gitid configuration directory.

    Resolution order: GITID_CONFIG_DIR, $XDG_CONFIG_HOME/gitid, ~/.config/gitid.
    """
    override = os.environ.get("GITID_CONFIG_DIR")
    if override:
        return Path(override).expanduser()
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg).expanduser() / "gitid"
    return get_home_dir() / ".config" / "gitid"


def get_ssh_dir() -> Path:
    return get_home_dir() / ".ssh"


def get_ssh_config_path() -> Path:
    """Get the SSH client config path, honouring GITID_SSH_CONFIG."""
    override = os.environ.get("GITID_SSH_CONFIG")
    if override:
        return Path(override).expanduser()
    return get_ssh_dir() / "config"


def contract_home(path: Path) -> str:
    """Render a path with the home directory shown as ~."""
    try:
        relative = path.relative_to(get_home_dir())
    except ValueError:
        return str(path)
    return f"~/{relative}"


def read_text(path: Path) -> str | None:
    """Read a file verbatim, returning None when it does not exist."""
    try:
        with open(path, "r", encoding="utf-8", newline="") as fh:
            return fh.read()
    except FileNotFoundError:
        return None
    except OSError as e:
        raise IOFailureError(f"Failed to read {path}", details=str(e)) from e


def atomic_write(path: Path, content: str, mode: int | None = None) -> None:
    """Replace a file's content without ever exposing a partial write.

    The content goes to a temporary sibling which is then renamed over the
    target. When ``mode`` is None the permission bits of the existing file are
    kept; new files get 0600.
    """
    if mode is None:
        try:
            mode = path.stat().st_mode & 0o777
        except OSError:
            # Missing file; anything worse surfaces when writing below
            mode = 0o600

    try:
        path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
    except OSError as e:
        raise IOFailureError(f"Failed to write {path}", details=str(e)) from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as fh:
            fh.write(content)
            fh.flush()
            os.fsync(fh.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except OSError as e:
        Path(tmp_name).unlink(missing_ok=True)
        raise IOFailureError(f"Failed to write {path}", details=str(e)) from e

    logger.debug(f"Wrote {path} ({len(content)} bytes, mode {mode:o})")


def attach_log_file(config_dir: Path) -> Path | None:
    """Send log records to gitid.log in ``config_dir`` once that directory exists.

    Replaces the handler from any earlier call, so the log follows the
    directory chosen for this invocation.

    Returns:
        Path of the log file, or None when the directory does not exist yet
    """
    global _log_handler
    root = logging.getLogger()
    if _log_handler is not None:
        root.removeHandler(_log_handler)
        _log_handler.close()
        _log_handler = None

    if not config_dir.is_dir():
        return None
    log_path = config_dir / LOG_FILENAME
    _log_handler = logging.FileHandler(log_path, delay=True)
    _log_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(_log_handler)
    return log_path
