"""Option types shared by the selector-driven commands."""

from __future__ import annotations

from typing import Annotated

import typer

from tkn_results.core.selector import DEFAULT_LIMIT, Selector

from .parsers import parse_finalizers, parse_owner_references, parse_selector
from .resources import ResourceType

ResourceArg = Annotated[
    str,
    typer.Argument(help="Resource type: pr/pipelinerun(s) or tr/taskrun(s)"),
]
NameArg = Annotated[
    str | None,
    typer.Argument(help="Resource name, partial names match"),
]
LimitOption = Annotated[
    int,
    typer.Option("--limit", help="Number of items per page (5-100)"),
]
UIDOption = Annotated[
    str,
    typer.Option("--uid", help="UID to select a unique item, partial UIDs match"),
]
LabelsOption = Annotated[
    str,
    typer.Option("--labels", "--selector", "-l", help="Filter by labels: k=v, k2==v2, k3"),
]
AnnotationsOption = Annotated[
    str,
    typer.Option("--annotations", help="Filter by annotations: k=v, k2"),
]
FinalizersOption = Annotated[
    str,
    typer.Option("--finalizers", help="Filter by finalizers, comma separated"),
]
OwnerReferencesOption = Annotated[
    str,
    typer.Option(
        "--owner-references",
        help='Filter by owner references: "kind=Service name=web, uid=1234"',
    ),
]
FilterOption = Annotated[
    str,
    typer.Option("--filter", help="Raw filter expression, ANDed with the other selectors"),
]


def build_selector(
    resource: ResourceType,
    namespace: str,
    *,
    name: str | None = None,
    uid: str = "",
    labels: str = "",
    annotations: str = "",
    finalizers: str = "",
    owner_references: str = "",
    raw_filter: str = "",
    limit: int | None = DEFAULT_LIMIT,
) -> Selector:
    """Assemble a validated Selector from command-line values."""
    selector = Selector(
        name=name or "",
        namespace=namespace,
        uid=uid,
        labels=parse_selector(labels),
        annotations=parse_selector(annotations),
        finalizers=parse_finalizers(finalizers),
        owner_references=parse_owner_references(owner_references),
        filter=raw_filter,
        kind=resource.kind,
        api_version=resource.api_version,
        limit=limit,
    )
    selector.validate()
    return selector
