"""Main CLI application module.

This module provides the ``tkn-results`` entry point.

Commands:
- get: List runs stored in tekton results, or print one
- delete: Delete runs with their logs and child runs
- logs: Print the stored log of a run
- config: Configure the client (kubeconfig extension)
- version: Print version information
"""

from dataclasses import replace
from typing import Annotated

import typer

from .commands import config_app, delete, get, logs, version
from .context import CLIContext, build_cli_context
from .shared.logging import configure_logging

app = typer.Typer(
    help="Query and delete runs stored in Tekton Results.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    namespace: Annotated[
        str | None,
        typer.Option(
            "--namespace",
            "-n",
            help="Namespace to search (default: from kubeconfig context)",
        ),
    ] = None,
    all_namespaces: Annotated[
        bool,
        typer.Option("--all-namespaces", "-A", help="Search every namespace"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log debug output to stderr"),
    ] = False,
) -> None:
    configure_logging(verbose)
    if isinstance(ctx.obj, CLIContext):
        ctx.obj = replace(ctx.obj, namespace_flag=namespace, all_namespaces=all_namespaces)
    else:
        ctx.obj = build_cli_context(namespace=namespace, all_namespaces=all_namespaces)


app.command()(get)
app.command()(delete)
app.command("logs")(logs)
app.command()(version)
app.add_typer(config_app, name="config")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
