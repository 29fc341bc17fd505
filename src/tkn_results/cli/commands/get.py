"""List stored runs, or print one in full."""

from typing import Annotated

import typer

from tkn_results.cli.context import get_cli_context
from tkn_results.cli.options import (
    AnnotationsOption,
    FilterOption,
    FinalizersOption,
    LabelsOption,
    LimitOption,
    NameArg,
    OwnerReferencesOption,
    ResourceArg,
    UIDOption,
    build_selector,
)
from tkn_results.cli.printer import check_output_format, list_table, render_object
from tkn_results.cli.resources import resolve
from tkn_results.cli.shared.console import with_error_handling
from tkn_results.core import iter_pages, single_object
from tkn_results.core.selector import DEFAULT_LIMIT


@with_error_handling
def get(
    ctx: typer.Context,
    resource: ResourceArg,
    name: NameArg = None,
    limit: LimitOption = DEFAULT_LIMIT,
    uid: UIDOption = "",
    labels: LabelsOption = "",
    annotations: AnnotationsOption = "",
    finalizers: FinalizersOption = "",
    owner_references: OwnerReferencesOption = "",
    raw_filter: FilterOption = "",
    output: Annotated[
        str | None,
        typer.Option("--output", "-o", help="Print one object in full: yaml or json"),
    ] = None,
) -> None:
    """Get runs from tekton results storage.

    Lists matching runs page by page, most recently updated first. With
    --output, exactly one run must match and it is printed in full.

    Examples:
        tkn-results get pr -n default
        tkn-results get pr build --limit 20
        tkn-results get tr --labels "tekton.dev/pipeline=build"
        tkn-results get pr build --uid e0e4148c -o yaml
    """
    cli = get_cli_context(ctx)
    kind = resolve(resource)
    check_output_format(output)
    kubeconfig = cli.kubeconfig()
    selector = build_selector(
        kind,
        cli.namespace(kubeconfig),
        name=name,
        uid=uid,
        labels=labels,
        annotations=annotations,
        finalizers=finalizers,
        owner_references=owner_references,
        raw_filter=raw_filter,
        limit=limit,
    )

    with cli.client(kubeconfig) as client:
        for page in iter_pages(client, selector):
            if output:
                obj = single_object(page.items, kind.plural)
                if obj is None:
                    cli.console.print(f"No {kind.plural} found")
                    return
                typer.echo(render_object(obj, output), nl=False)
                return

            if not page.items:
                cli.console.print(f"No {kind.plural} found")
                return
            cli.console.print(list_table(page.items, all_namespaces=cli.all_namespaces))

            if page.next_page_token and not cli.console.next_page():
                return
