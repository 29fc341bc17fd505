"""Version information."""

import typer

from tkn_results import __version__
from tkn_results.infra.results.proto import PACKAGE


def version() -> None:
    """Print the client version and the Results API version it speaks."""
    typer.echo(f"Client Version: v{__version__}")
    typer.echo(f"API Version: {PACKAGE.rsplit('.', 1)[-1]}")
