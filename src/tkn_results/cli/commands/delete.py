"""Cascade-delete stored runs."""

from typing import Annotated, Any

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
from tkn_results.cli.resources import resolve
from tkn_results.cli.shared.console import with_error_handling
from tkn_results.core import delete_matching
from tkn_results.core.selector import DEFAULT_LIMIT, WILDCARD


@with_error_handling
def delete(
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
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt"),
    ] = False,
) -> None:
    """Delete runs from tekton results storage.

    Every matching run is deleted together with its log and every child
    run it owns. A result is removed once no records are left under it.
    All selectors combine with AND.

    Examples:
        tkn-results delete pr -n default
        tkn-results delete pr build --uid e0e4148c
        tkn-results delete pr --annotations "results.tekton.dev/log"
        tkn-results delete pr --owner-references "kind=Service name=web"
        tkn-results delete pr --filter "data.status.conditions[0].reason in ['Failed']"
    """
    cli = get_cli_context(ctx)
    kind = resolve(resource)
    kubeconfig = cli.kubeconfig()
    namespace = cli.namespace(kubeconfig)
    selector = build_selector(
        kind,
        namespace,
        name=name,
        uid=uid,
        labels=labels,
        annotations=annotations,
        finalizers=finalizers,
        owner_references=owner_references,
        raw_filter=raw_filter,
        limit=limit,
    )

    scope = "all namespaces" if namespace == WILDCARD else f"namespace '{namespace}'"
    if not cli.console.confirm_delete(kind.plural, scope, force=yes):
        cli.console.print("[dim]Operation cancelled[/dim]")
        raise typer.Exit(0)

    deleted = 0

    def report(obj: dict[str, Any]) -> None:
        nonlocal deleted
        deleted += 1
        meta = obj.get("metadata") or {}
        cli.console.print(f"[dim]{kind.kind.lower()} {meta.get('name', '')} deleted[/dim]")

    with cli.client(kubeconfig) as client:
        try:
            delete_matching(client, selector, on_deleted=report)
        finally:
            cli.console.print(f"{deleted} resource(s) deleted.")
