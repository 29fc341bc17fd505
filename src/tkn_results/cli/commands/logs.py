"""Print the stored log of a run."""

import typer

from tkn_results.cli.context import get_cli_context
from tkn_results.cli.options import NameArg, ResourceArg, UIDOption
from tkn_results.cli.resources import resolve
from tkn_results.cli.shared.console import with_error_handling
from tkn_results.core import fetch_log, list_records, log_name
from tkn_results.core.selector import Selector


@with_error_handling
def logs(
    ctx: typer.Context,
    resource: ResourceArg,
    name: NameArg = None,
    uid: UIDOption = "",
) -> None:
    """Get the logs of a run from tekton results storage.

    Examples:
        tkn-results logs pr build
        tkn-results logs tr build-test --uid f27a6d83-21d3-4256-a8f0-0875b123895f
    """
    cli = get_cli_context(ctx)
    kind = resolve(resource)
    kubeconfig = cli.kubeconfig()
    selector = Selector(
        name=name or "",
        namespace=cli.namespace(kubeconfig),
        uid=uid,
        kind=kind.kind,
        api_version=kind.api_version,
    )

    with cli.client(kubeconfig) as client:
        items = list_records(client, selector).items
        if len(items) > 1:
            cli.console.print(f"Multiple {kind.plural} found, narrow down with --uid flag.")
            return
        if not items:
            cli.console.print(f"No {kind.plural} found")
            return

        log = log_name(items[0])
        if log is None:
            cli.console.print("No logs found")
            return
        typer.echo(fetch_log(client, log), nl=False)
