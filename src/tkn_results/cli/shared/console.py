"""Shared console output, prompts and error handling for CLI commands."""

from collections.abc import Callable

import typer
from loguru import logger
from rich.console import Console, ConsoleRenderable
from rich.markup import escape
from rich.panel import Panel

from tkn_results.core.errors import ConfigError, ResultsError


class CLIConsole:
    """Rich console wrapper for consistent CLI output."""

    def __init__(self) -> None:
        """Initialize the CLI console."""
        self.console = Console(highlight=False)

    def print(self, msg: ConsoleRenderable | str | None = None) -> None:
        self.console.print(msg)

    def info(self, msg: str) -> None:
        self.console.print(f"[cyan]ℹ[/cyan]  {msg}")

    def ok(self, msg: str) -> None:
        self.console.print(f"[green]✅[/green] {msg}")

    def error(self, msg: str) -> None:
        self.console.print(f"[red]❌[/red] {msg}")

    def warn(self, msg: str) -> None:
        self.console.print(f"[yellow]⚠️[/yellow]  {msg}")

    def confirm_delete(self, what: str, scope: str, force: bool = False) -> bool:
        """Ask before a cascade delete. ``force`` answers yes without asking."""
        if force:
            return True

        self.console.print(
            Panel(
                f"[bold red]⚠️  Delete {what}[/bold red]\n\n"
                f"Every match in {scope} is removed with its logs and child runs.\n"
                "[yellow]This cannot be undone.[/yellow]",
                title="Confirmation Required",
                border_style="red",
            )
        )
        try:
            response = self.console.input("\n[bold]Delete?[/bold] \\[y/N]: ")
        except (KeyboardInterrupt, EOFError):
            self.console.print("\n[dim]Cancelled.[/dim]")
            return False
        return response.strip().lower() in ("y", "yes")

    def next_page(self) -> bool:
        """Ask whether to fetch the next page. Enter continues, ``q`` stops."""
        try:
            response = self.console.input(
                "\n[dim]Next page: press Enter to continue, q to quit[/dim] "
            )
        except (KeyboardInterrupt, EOFError):
            return False
        self.console.print()
        return response.strip().lower() not in ("q", "quit", "n", "no")

    def handle_error(
        self, message: str, details: str | None = None, exit_code: int = 1
    ) -> None:
        """Handle an error by printing a message and exiting.

        Args:
            message: Error message to display
            details: Optional additional details
            exit_code: Exit code to use
        """
        self.error(f"[bold red]{message}[/bold red]")
        if details:
            self.console.print(Panel(details, title="Details", border_style="red"))
        raise typer.Exit(exit_code)

    # -------------------------------------------------------------------------
    # Configuration prompts
    # -------------------------------------------------------------------------

    def ask(self, message: str, default: str = "", *, password: bool = False) -> str:
        """Ask for a required value; Enter keeps ``default``."""
        shown = ("*" * 8 if password else default) if default else ""
        suffix = f" \\[{shown}]" if shown else ""
        while True:
            try:
                response = self.console.input(f"[bold]{message}[/bold]{suffix} ", password=password)
            except EOFError as e:
                if default:
                    return default
                raise ConfigError(f"{message.rstrip(' :')} is required") from e
            value = response.strip() or default
            if value:
                return value
            self.console.print("[red]Value is required[/red]")

    def choose(self, title: str, options: list[str], descriptions: list[str] | None = None) -> str:
        """Pick one of ``options`` by number; Enter takes the first.

        Raises:
            ConfigError: If the user cancels with 0 or Ctrl-D
        """
        self.console.print(f"\n[yellow]{title}[/yellow]")
        for i, option in enumerate(options, 1):
            note = descriptions[i - 1] if descriptions else ""
            self.console.print(f"  [bold]{i}.[/bold] {option} [dim]{escape(note)}[/dim]")
        self.console.print("  [bold]0.[/bold] Cancel")

        while True:
            try:
                response = self.console.input("Enter choice [1]: ").strip() or "1"
            except EOFError:
                response = "0"
            if response == "0":
                raise ConfigError(f"{title.rstrip(' :')} selection cancelled")
            if response.isdigit() and 1 <= int(response) <= len(options):
                return options[int(response) - 1]
            self.console.print(f"[red]Please enter a number between 0 and {len(options)}[/red]")


def with_error_handling(func: Callable[..., None]) -> Callable[..., None]:
    """Decorator to wrap command functions with standard error handling.

    Reports ``ResultsError`` with its details and exits 1; Ctrl-C exits 130.

    Args:
        func: The command function to wrap

    Returns:
        Wrapped function with error handling
    """
    from functools import wraps

    @wraps(func)
    def wrapper(*args: object, **kwargs: object) -> None:
        try:
            func(*args, **kwargs)
        except ResultsError as e:
            logger.debug(f"{type(e).__name__}: {e}")
            console.handle_error(str(e), e.details)
        except KeyboardInterrupt:
            console.print("\n[dim]Operation cancelled by user.[/dim]")
            raise typer.Exit(130) from None

    return wrapper


# Shared console instance for consistent output
console = CLIConsole()
