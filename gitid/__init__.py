"""gitid - switch between multiple Git identities."""

from gitid.detect import detect_profile
from gitid.profile import Platform, Profile, ProfileStore
from gitid.ssh import sync_ssh_config
from gitid.version import __version__

__all__ = [
    "Platform",
    "Profile",
    "ProfileStore",
    "__version__",
    "detect_profile",
    "sync_ssh_config",
]
