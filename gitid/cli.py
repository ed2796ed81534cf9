"""Command-line interface."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from functools import wraps
from pathlib import Path
from typing import Any, TypeVar, cast

import click
import git
from rich.markup import escape

from .auth import authenticate
from .detect import detect_profile
from .exceptions import DuplicateNameError, GitidError, NoMatchError, StaleSelectionError
from .git import GLOBAL, LOCAL, apply_identity, current_identity, find_repo, get_remote_url, open_repo
from .profile import Platform, Profile, ProfileStore
from .selection import GlobalSelection, LocalSelection, Selection, resolve_selection
from .ssh import sync_ssh_config
from .ssh_keys import discover_keys, generate_key
from .system_utils import (
    ACTIVE_FILENAME,
    CONFIG_FILENAME,
    attach_log_file,
    contract_home,
    get_config_dir,
    get_ssh_config_path,
    get_ssh_dir,
)
from .ui import (
    print_detection,
    print_key_table,
    print_profile_details,
    print_profile_table,
    print_sync_result,
    prompt_profile,
    prompt_ssh_key,
)
from .ui_common import (
    confirm_action,
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from .version import __version__

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


@dataclass
class AppContext:
    """Paths resolved once per invocation."""
    config_dir: Path
    ssh_config: Path

    @property
    def store_path(self) -> Path:
        return self.config_dir / CONFIG_FILENAME

    @property
    def global_selection(self) -> GlobalSelection:
        return GlobalSelection(self.config_dir / ACTIVE_FILENAME)

    def load_store(self) -> ProfileStore:
        return ProfileStore.load(self.store_path)

    def current_selection(self, store: ProfileStore) -> Selection | None:
        repo = find_repo()
        local_value = LocalSelection(repo).get() if repo is not None else None
        return resolve_selection(self.global_selection.get(), local_value, store)


pass_app = click.make_pass_decorator(AppContext)


def handle_errors(f: F) -> F:
    """Decorator to report gitid errors and exit non-zero."""
    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return f(*args, **kwargs)
        except GitidError as e:
            logger.debug(f"{type(e).__name__}: {e}")
            print_error(str(e), details=e.details, hint=e.hint)
            raise SystemExit(1)
    return cast(F, wrapper)


@click.group()
@click.version_option(__version__, prog_name="gitid")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Configuration directory (default: ~/.config/gitid)",
)
@click.option(
    "--ssh-config",
    type=click.Path(dir_okay=False, path_type=Path),
    help="SSH client config file (default: ~/.ssh/config)",
)
@click.pass_context
def cli(ctx: click.Context, debug: bool, config_dir: Path | None, ssh_config: Path | None) -> None:
    """Manage multiple Git identities across GitHub and GitLab."""
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Debug mode enabled")

    ctx.obj = AppContext(
        config_dir=config_dir or get_config_dir(),
        ssh_config=ssh_config or get_ssh_config_path(),
    )
    attach_log_file(ctx.obj.config_dir)
    logger.debug(f"Config dir {ctx.obj.config_dir}, SSH config {ctx.obj.ssh_config}")


@cli.command()
@pass_app
@handle_errors
def init(app: AppContext) -> None:
    """Create the configuration directory and an empty profile store."""
    _, created = ProfileStore.init(app.store_path)
    if created:
        print_success(f"Created config at {app.store_path}")
    else:
        print_info(f"Config already exists at {app.store_path}")


@cli.command()
@click.argument("name")
@click.option("--email", prompt="Git email", help="Git email address")
@click.option(
    "--platform",
    type=click.Choice(["github", "gitlab", "both"], case_sensitive=False),
    prompt="Platform",
    help="Hosting platform",
)
@click.option("--ssh-key", help="Path to the SSH private key")
@click.option("--generate-key", "generate", is_flag=True, help="Generate a new ed25519 key for this profile")
@click.option("--gpg-key", help="GPG signing key ID")
@click.option("--host", help="Custom host for enterprise or self-hosted instances")
@click.option("--user-name", help="Git user.name (defaults to the profile name)")
@pass_app
@handle_errors
def add(
    app: AppContext,
    name: str,
    email: str,
    platform: str,
    ssh_key: str | None,
    generate: bool,
    gpg_key: str | None,
    host: str | None,
    user_name: str | None,
) -> None:
    """Add a new profile."""
    store = app.load_store()
    if name in store:
        raise DuplicateNameError(f"Profile '{name}' already exists", profile_name=name)

    ssh_dir = get_ssh_dir()
    new_key_path = contract_home(ssh_dir / f"id_ed25519_{name}")
    if generate and ssh_key:
        raise click.UsageError("--ssh-key and --generate-key are mutually exclusive")
    if not generate and not ssh_key:
        ssh_key = prompt_ssh_key(discover_keys(ssh_dir), new_key_path)
        generate = ssh_key is None
    if generate:
        ssh_key = new_key_path

    profile = Profile(
        name=name,
        email=email,
        platform=Platform.from_str(platform),
        ssh_key=ssh_key,
        gpg_key=gpg_key,
        host=host,
        user_name=user_name,
    )
    store.add(profile)

    if generate:
        key = generate_key(name, email, ssh_dir)
        print_success(f"Generated SSH key: {key.display_path}")
        console.print("\n[highlight]Public key (add this to your account):[/highlight]")
        console.print(escape(key.get_public_key()), soft_wrap=True)
        console.print()

    store.save()
    print_success(f"Added profile '{name}'")
    print_info("Run 'gitid ssh-sync' to update your SSH config")


@cli.command()
@click.argument("name", required=False)
@click.option("-f", "--force", is_flag=True, help="Skip confirmation prompt")
@click.option("--clean-ssh", is_flag=True, help="Also remove the profile's SSH config entry")
@pass_app
@handle_errors
def remove(app: AppContext, name: str | None, force: bool, clean_ssh: bool) -> None:
    """Remove a profile (prompts for one when NAME is omitted)."""
    store = app.load_store()
    if name is None:
        name = prompt_profile(store.names(), "Profile to remove")
    store.get(name)

    if not force and not confirm_action(f"Remove profile '{name}'?", default=False):
        print_info("Cancelled")
        return

    store.remove(name)
    store.save()
    print_success(f"Removed profile '{name}'")

    if clean_ssh:
        sync_ssh_config(store, app.ssh_config)
        print_success("SSH config updated")


@cli.command(name="list")
@pass_app
@handle_errors
def list_profiles(app: AppContext) -> None:
    """List all configured profiles."""
    store = app.load_store()
    if not store:
        print_info("No profiles configured. Add one with: gitid add NAME")
        return

    try:
        current = app.current_selection(store)
    except StaleSelectionError as e:
        print_warning(str(e))
        current = None
    print_profile_table(list(store), current)


@cli.command()
@click.argument("name", required=False)
@click.option("-g", "--global", "global_", is_flag=True, help="Apply globally instead of to the current repository")
@click.option("--unset", is_flag=True, help="Clear the selection for the scope")
@pass_app
@handle_errors
def use(app: AppContext, name: str | None, global_: bool, unset: bool) -> None:
    """Switch to a profile (prompts for one when NAME is omitted)."""
    scope = GLOBAL if global_ else LOCAL
    repo = None if global_ else open_repo()
    selection = app.global_selection if global_ else LocalSelection(repo)

    if unset:
        if name:
            raise click.UsageError("NAME cannot be combined with --unset")
        selection.clear()
        print_success(f"Cleared the {scope} profile selection")
        return

    store = app.load_store()
    if not name:
        name = prompt_profile(store.names())
    profile = store.get(name)
    apply_identity(profile, scope, repo)
    selection.set(name)

    print_success(f"Switched to profile '{name}' {scope}ly")
    print_profile_details(profile, scope)


@cli.command()
@click.option("--porcelain", is_flag=True, help="Print only the profile name, for shell prompts")
@pass_app
@handle_errors
def current(app: AppContext, porcelain: bool) -> None:
    """Show the current profile."""
    store = app.load_store()
    selection = app.current_selection(store)

    if porcelain:
        if selection is not None:
            click.echo(selection.profile.name)
        return

    if selection is not None:
        print_profile_details(selection.profile, selection.scope)
        return

    print_info("No profile selected")
    git_name, git_email = current_identity(find_repo())
    if git_name or git_email:
        console.print("Current git identity (no matching profile):")
        if git_name:
            console.print(f"  Name:  {escape(git_name)}")
        if git_email:
            console.print(f"  Email: {escape(git_email)}")


@cli.command()
@click.option("-a", "--auto", is_flag=True, help="Apply the detected profile without prompting")
@click.option("--url", help="Remote URL to match instead of the repository's remote")
@click.option("--remote", help="Remote to read (default: origin, else the first remote)")
@pass_app
@handle_errors
def detect(app: AppContext, auto: bool, url: str | None, remote: str | None) -> None:
    """Detect the profile that fits the repository's remote."""
    store = app.load_store()
    repo = find_repo()
    if url is None:
        url = get_remote_url(repo if repo is not None else open_repo(), remote)

    try:
        result = detect_profile(store, url)
    except NoMatchError:
        if not store:
            raise
        print_warning("No profile matched; available profiles:")
        print_profile_table(list(store))
        if repo is None or auto or not confirm_action("Select a profile manually?", default=True):
            raise
        _apply_to_repo(store.get(prompt_profile(store.names())), repo)
        return

    print_detection(result)

    if repo is None:
        return
    if auto or confirm_action("Apply this profile to the repository?", default=True):
        _apply_to_repo(result.profile, repo)
    else:
        print_info("Cancelled")


def _apply_to_repo(profile: Profile, repo: git.Repo) -> None:
    apply_identity(profile, LOCAL, repo)
    LocalSelection(repo).set(profile.name)
    print_success(f"Applied profile '{profile.name}'")


@cli.command(name="ssh-sync")
@pass_app
@handle_errors
def ssh_sync(app: AppContext) -> None:
    """Write a Host alias for every profile into the SSH config."""
    store = app.load_store()
    result = sync_ssh_config(store, app.ssh_config)

    if not result.changed:
        print_info("SSH config already up to date")
    else:
        action = "Added" if result.appended else "Updated"
        print_success(f"{action} SSH config with {len(result.aliases)} profile(s)")
    print_sync_result(result)


@cli.command()
@click.argument("name", required=False)
@pass_app
@handle_errors
def auth(app: AppContext, name: str | None) -> None:
    """Authenticate the gh/glab CLI tools for a profile."""
    store = app.load_store()
    if name is None:
        name = prompt_profile(store.names())
    profile = store.get(name)
    print_info(f"Authenticating CLI tools for profile '{name}'...")
    authenticate(profile)
    print_success(f"Authentication complete for '{name}'")


@cli.command()
@handle_errors
def keys() -> None:
    """List SSH key pairs found in ~/.ssh."""
    found = discover_keys(get_ssh_dir())
    if not found:
        print_info("No SSH key pairs found. Create one with: gitid add NAME --generate-key")
        return
    print_key_table(found)
