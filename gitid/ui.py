"""Tables, summaries and prompts used by the CLI."""

from rich import box
from rich.markup import escape
from rich.prompt import Prompt
from rich.table import Table

from .detect import DetectionResult
from .exceptions import GitidError
from .profile import Profile
from .selection import Selection
from .ssh import SyncResult
from .ssh_keys import SSHKey
from .ui_common import console


def print_profile_table(profiles: list[Profile], current: Selection | None = None) -> None:
    """Print profiles in a table format."""
    table = Table(
        title="Git Profiles",
        box=box.ROUNDED,
        header_style="bold cyan",
        border_style="blue",
    )

    table.add_column("Name", style="cyan")
    table.add_column("Email", style="green")
    table.add_column("Platform", style="yellow")
    table.add_column("SSH Key", style="magenta")
    table.add_column("Host", style="blue")
    table.add_column("GPG Key")
    table.add_column("Active", justify="center", style="bold green")

    for profile in profiles:
        active = ""
        if current is not None and current.profile.name == profile.name:
            active = f"✓ {current.scope}"
        table.add_row(
            escape(profile.name),
            escape(profile.email),
            str(profile.platform),
            escape(profile.ssh_key),
            escape(profile.default_host),
            escape(profile.gpg_key or ""),
            active,
        )

    console.print(table)
    console.print()


def print_profile_details(profile: Profile, scope: str | None = None) -> None:
    """Print one profile as aligned key/value lines."""
    heading = f"[profile]{escape(profile.name)}[/profile]"
    if scope:
        heading += f" [dim]({scope})[/dim]"
    console.print(heading)
    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="dim")
    grid.add_column()
    grid.add_row("Name", escape(profile.git_user_name))
    grid.add_row("Email", escape(profile.email))
    grid.add_row("Platform", str(profile.platform))
    grid.add_row("SSH Key", escape(profile.ssh_key))
    grid.add_row("Alias", f"{escape(profile.ssh_alias)} -> {escape(profile.default_host)}")
    if profile.gpg_key:
        grid.add_row("GPG Key", escape(profile.gpg_key))
    console.print(grid)


def print_detection(result: DetectionResult) -> None:
    """Print the winning profile and the score of every candidate."""
    console.print(f"[success]Match:[/success] [profile]{escape(result.profile.name)}[/profile]")
    console.print(f"[dim]Remote: {escape(result.url.raw)}[/dim]")

    table = Table(box=box.SIMPLE, header_style="bold cyan")
    table.add_column("Profile", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Signals", style="yellow")
    for match in result.matches:
        table.add_row(escape(match.name), str(match.score), ", ".join(match.signals))
    console.print(table)


def print_sync_result(result: SyncResult) -> None:
    """Print where ssh-sync wrote and which aliases exist."""
    console.print(f"  File: [path]{escape(str(result.path))}[/path]")
    if not result.aliases:
        return
    console.print("\nSSH Host aliases:")
    for alias, hostname in result.aliases:
        console.print(f"  [cyan]{escape(alias)}[/cyan] -> {escape(hostname)}")


def print_key_table(keys: list[SSHKey]) -> None:
    table = Table(title="SSH Keys", box=box.ROUNDED, header_style="bold cyan", border_style="blue")
    table.add_column("Path", style="magenta")
    table.add_column("Type", style="yellow")
    for key in keys:
        table.add_row(escape(key.display_path), key.key_type)
    console.print(table)


def _ask(prompt: str, **kwargs) -> str:
    try:
        return Prompt.ask(prompt, console=console, **kwargs)
    except (KeyboardInterrupt, EOFError):
        raise GitidError("Operation cancelled by user") from None


def prompt_profile(names: list[str], prompt: str = "Profile") -> str:
    """Ask the user to pick one of the profile names."""
    if not names:
        raise GitidError("No profiles configured", details="Add one with: gitid add NAME")
    console.print(f"[dim]Profiles: {escape(', '.join(names))}[/dim]")
    return _ask(f"[cyan]{prompt}[/cyan]", choices=names, show_choices=False)


def prompt_ssh_key(keys: list[SSHKey], default_path: str) -> str | None:
    """Pick an existing key, a manual path, or a new key.

    Returns:
        The key path, or None when a new key should be generated
    """
    console.print("\n[cyan]SSH key[/cyan]")
    table = Table(box=box.ROUNDED, show_header=False, border_style="blue")
    table.add_column("Choice", style="cyan")
    table.add_column("Key")
    for number, key in enumerate(keys, start=1):
        table.add_row(str(number), f"{escape(key.display_path)} ({key.key_type})")
    table.add_row("g", "Generate a new ed25519 key")
    table.add_row("m", "Enter a path manually")
    console.print(table)

    choices = [str(n) for n in range(1, len(keys) + 1)] + ["g", "m"]
    choice = _ask("[cyan]SSH key[/cyan]", choices=choices, default="1" if keys else "m")
    if choice == "g":
        return None
    if choice == "m":
        return _ask("[cyan]SSH key path[/cyan]", default=default_path).strip()
    return keys[int(choice) - 1].display_path
