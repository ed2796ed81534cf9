"""SSH key discovery and generation."""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

from .exceptions import GitidError, IOFailureError
from .system_utils import contract_home

logger = logging.getLogger(__name__)

DEFAULT_KEY_TYPE = "ed25519"
SKIPPED_FILES = {"config", "known_hosts", "known_hosts.old", "authorized_keys"}


@dataclass
class SSHKey:
    """Represents an SSH key pair."""
    private_key: Path
    public_key: Path
    key_type: str

    @property
    def name(self) -> str:
        return self.private_key.name

    @property
    def display_path(self) -> str:
        """Private key path with the home directory shown as ~."""
        return contract_home(self.private_key)

    def get_public_key(self) -> str:
        """Get the contents of the public key file."""
        try:
            return self.public_key.read_text().strip()
        except OSError as e:
            raise IOFailureError(f"Failed to read public key: {self.public_key}", details=str(e)) from e


def detect_key_type(private_key: Path) -> str:
    """Guess the key algorithm from the public key, then the file name."""
    public_key = private_key.with_name(private_key.name + ".pub")
    try:
        prefix = public_key.read_text().split(" ", 1)[0]
    except OSError:
        prefix = ""
    if prefix == "ssh-ed25519":
        return "ed25519"
    if prefix == "ssh-rsa":
        return "rsa"
    if prefix.startswith("ecdsa-"):
        return "ecdsa"
    for key_type in ("ed25519", "ecdsa", "rsa"):
        if key_type in private_key.name:
            return key_type
    return "unknown"


def discover_keys(ssh_dir: Path) -> list[SSHKey]:
    """List private keys in ``ssh_dir`` that have a matching .pub file."""
    if not ssh_dir.is_dir():
        return []

    keys = []
    for path in ssh_dir.iterdir():
        if (
            not path.is_file()
            or path.name.endswith(".pub")
            or path.name in SKIPPED_FILES
            or path.name.startswith(".")
        ):
            continue
        public_key = path.with_name(path.name + ".pub")
        if public_key.exists():
            keys.append(SSHKey(path, public_key, detect_key_type(path)))

    keys.sort(key=lambda k: k.name)
    logger.debug(f"Found {len(keys)} key pair(s) in {ssh_dir}")
    return keys


def generate_key(profile_name: str, email: str, ssh_dir: Path) -> SSHKey:
    """Generate an ed25519 key pair named after the profile.

    Raises:
        GitidError: if the key already exists or ssh-keygen is unavailable
        IOFailureError: if ssh-keygen fails
    """
    private_key = ssh_dir / f"id_{DEFAULT_KEY_TYPE}_{profile_name}"
    public_key = private_key.with_name(private_key.name + ".pub")
    if private_key.exists():
        raise GitidError(f"SSH key already exists: {private_key}")

    try:
        ssh_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
        subprocess.run(
            [
                "ssh-keygen",
                "-t", DEFAULT_KEY_TYPE,
                "-C", email,
                "-f", str(private_key),
                "-N", "",  # Empty passphrase
            ],
            check=True,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as e:
        raise GitidError(
            "ssh-keygen not found",
            details="Install OpenSSH to generate keys",
        ) from e
    except subprocess.CalledProcessError as e:
        raise IOFailureError("Failed to generate SSH key", details=e.stderr) from e
    except OSError as e:
        raise IOFailureError(f"Failed to create {ssh_dir}", details=str(e)) from e

    logger.debug(f"Generated {private_key}")
    return SSHKey(private_key, public_key, DEFAULT_KEY_TYPE)
