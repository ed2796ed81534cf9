"""Console and message helpers shared across modules."""

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm
from rich.theme import Theme

from .exceptions import GitidError

theme = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "red",
        "success": "green",
        "title": "bold cyan",
        "highlight": "bold yellow",
        "path": "blue",
        "command": "green",
        "profile": "bold cyan",
    }
)

console = Console(theme=theme)
err_console = Console(theme=theme, stderr=True)


def print_error(message: str, details: str | None = None, hint: str | None = None) -> None:
    """Print error message with optional details and a suggested next step."""
    err_console.print(f"[error]Error:[/error] {escape(message)}")
    if details:
        err_console.print(f"[dim]{escape(details)}[/dim]")
    if hint:
        err_console.print(f"[info]Hint:[/info] {escape(hint)}")


def print_warning(message: str) -> None:
    """Print warning message."""
    console.print(f"[warning]Warning:[/warning] {message}")


def print_info(message: str) -> None:
    """Print info message."""
    console.print(f"[info]Info:[/info] {message}")


def print_success(message: str) -> None:
    """Print success message."""
    console.print(f"[success]Success:[/success] {message}")


def confirm_action(prompt: str, default: bool = True) -> bool:
    """Confirm an action with the user."""
    try:
        return Confirm.ask(prompt, default=default, console=console)
    except (KeyboardInterrupt, EOFError):
        raise GitidError("Operation cancelled by user") from None
