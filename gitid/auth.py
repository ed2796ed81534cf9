"""Log the gh and glab command-line tools in for a profile."""

import logging
import shutil
import subprocess

from .exceptions import GitidError
from .profile import Platform, Profile

logger = logging.getLogger(__name__)

TOOLS = {
    Platform.GITHUB: ("gh", "GitHub", "https://cli.github.com/"),
    Platform.GITLAB: ("glab", "GitLab", "https://gitlab.com/gitlab-org/cli"),
}


def build_login_command(platform: Platform, host: str | None) -> list[str]:
    """Command line for logging one tool in."""
    tool = TOOLS[platform][0]
    cmd = [tool, "auth", "login"]
    if host and host != platform.default_host:
        cmd.extend(["--hostname", host])
    if platform is Platform.GITHUB:
        cmd.extend(["--git-protocol", "ssh"])
    return cmd


def authenticate(profile: Profile) -> list[Platform]:
    """Run the interactive login for each platform the profile covers.

    Returns:
        Platforms that were authenticated
    """
    if profile.platform is Platform.BOTH:
        platforms = [Platform.GITHUB, Platform.GITLAB]
    else:
        platforms = [profile.platform]

    for platform in platforms:
        tool, label, url = TOOLS[platform]
        if shutil.which(tool) is None:
            raise GitidError(
                f"{label} CLI ({tool}) is not installed",
                details=f"Install it from {url}",
            )
        cmd = build_login_command(platform, profile.host)
        logger.debug(f"Running {' '.join(cmd)}")
        # stdin/stdout stay attached so the tool can prompt
        result = subprocess.run(cmd)
        if result.returncode != 0:
            raise GitidError(f"{label} authentication failed", details=f"{tool} exited with {result.returncode}")

    return platforms
