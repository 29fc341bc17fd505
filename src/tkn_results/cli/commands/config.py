"""Configure the Results API client."""

from typing import Annotated

import typer
import yaml

from tkn_results.cli.context import get_cli_context
from tkn_results.cli.parsers import parse_args
from tkn_results.cli.shared.console import with_error_handling

config_app = typer.Typer(
    name="config",
    help="Manage tkn-results configuration stored in the kubeconfig.",
    no_args_is_help=True,
)


@config_app.command()
@with_error_handling
def results(
    ctx: typer.Context,
    args: Annotated[
        list[str] | None,
        typer.Argument(help="Settings as key=value; a bare key asks for its value"),
    ] = None,
    view: Annotated[
        bool,
        typer.Option("--view", help="Print the current configuration"),
    ] = False,
    raw: Annotated[
        bool,
        typer.Option("--raw", help="With --view, show the token unmasked"),
    ] = False,
    reset: Annotated[
        bool,
        typer.Option("--reset", help="Clear the configuration and set it up again"),
    ] = False,
    no_prompt: Annotated[
        bool,
        typer.Option("--no-prompt", help="Never ask interactively"),
    ] = False,
) -> None:
    """Configure the tekton results client for the current kubeconfig context.

    Examples:
        tkn-results config results
        tkn-results config results host token
        tkn-results config results host="https://localhost:8080" token="test-token"
        tkn-results config results --view
    """
    cli = get_cli_context(ctx)
    config = cli.results_config()

    if view:
        typer.echo(yaml.safe_dump(config.view(raw=raw), default_flow_style=False, sort_keys=False), nl=False)
        return

    if reset:
        config.reset(prompt=not no_prompt)
        cli.console.ok("Configuration reset")
        return

    config.set(parse_args(args), prompt=not no_prompt)
    cli.console.ok(f"Configuration saved to {config.kubeconfig.path}")
