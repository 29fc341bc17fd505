"""Selector model and filter-expression encoder.

A ``Selector`` describes which stored objects a command applies to. The
encoder turns it into the CEL-like filter language understood by the
Results API, e.g.::

    data_type=="tekton.dev/v1beta1.PipelineRun" && data.metadata.name.contains("build")

Values are substituted literally; quotes or other grammar characters in a
value are not escaped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import cast

from .errors import SelectorError

WILDCARD = "-"

MIN_LIMIT = 5
MAX_LIMIT = 100
DEFAULT_LIMIT = 10

CONTAINS = 'data.metadata.{field}.contains("{value}")'
EQUAL = 'data.metadata.{field}["{key}"]=="{value}"'
DATA_TYPE = 'data_type=="{api_version}.{kind}"'

CLAUSE_SEPARATOR = " && "


@dataclass
class OwnerReference:
    """Subset of a Kubernetes owner reference used for matching.

    Every non-empty field becomes its own ``contains`` clause.
    """

    api_version: str = ""
    kind: str = ""
    name: str = ""
    uid: str = ""

    def values(self) -> list[str]:
        return [v for v in (self.api_version, self.kind, self.name, self.uid) if v]


@dataclass
class Selector:
    """Which stored objects to operate on.

    Attributes:
        namespace: Namespace to search; empty or ``-`` means all namespaces
        filter: Raw filter expression prepended verbatim
        limit: Page size, ``None`` for the server default
        continue_token: Page cursor, advanced by the page loop
    """

    name: str = ""
    namespace: str = ""
    uid: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    owner_references: list[OwnerReference] = field(default_factory=list)
    finalizers: list[str] = field(default_factory=list)
    filter: str = ""
    kind: str = ""
    api_version: str = ""
    limit: int | None = None
    continue_token: str = ""

    def validate(self) -> None:
        """Reject selectors the API would refuse.

        Raises:
            SelectorError: If ``limit`` is set and outside [5, 100]
        """
        if self.limit is not None and not MIN_LIMIT <= self.limit <= MAX_LIMIT:
            raise SelectorError(
                f"limit should be between {MIN_LIMIT} and {MAX_LIMIT}",
                details=f"got {self.limit}",
            )

    @property
    def search_namespace(self) -> str:
        return self.namespace or WILDCARD

    @property
    def parent(self) -> str:
        """Parent path covering every Result in the searched namespace."""
        return f"{self.search_namespace}/results/{WILDCARD}"

    def encode(self) -> str:
        return encode(self)


# =============================================================================
# Encoder
# =============================================================================


class ClauseKind(Enum):
    SCALAR = auto()
    MAP = auto()
    LIST = auto()
    OWNER = auto()


# (wire name, Selector attribute, clause kind), walked in this order
ENCODER: tuple[tuple[str, str, ClauseKind], ...] = (
    ("name", "name", ClauseKind.SCALAR),
    ("namespace", "namespace", ClauseKind.SCALAR),
    ("uid", "uid", ClauseKind.SCALAR),
    ("labels", "labels", ClauseKind.MAP),
    ("annotations", "annotations", ClauseKind.MAP),
    ("ownerReferences", "owner_references", ClauseKind.OWNER),
    ("finalizers", "finalizers", ClauseKind.LIST),
)


def _clauses(wire: str, value: object, kind: ClauseKind) -> list[str]:
    match kind:
        case ClauseKind.SCALAR:
            if not value or (wire == "namespace" and value == WILDCARD):
                return []
            return [CONTAINS.format(field=wire, value=value)]
        case ClauseKind.MAP:
            entries = cast(dict[str, str], value)
            return [
                EQUAL.format(field=wire, key=k, value=v) if v else CONTAINS.format(field=wire, value=k)
                for k, v in entries.items()
            ]
        case ClauseKind.LIST:
            return [CONTAINS.format(field=wire, value=v) for v in cast(list[str], value) if v]
        case ClauseKind.OWNER:
            refs = cast(list[OwnerReference], value)
            return [CONTAINS.format(field=wire, value=v) for ref in refs for v in ref.values()]


def encode(selector: Selector) -> str:
    """Build the filter expression for ``selector``.

    Args:
        selector: Selector to encode

    Returns:
        Clauses joined with ``&&``, or an empty string when nothing is set

    Example:
        >>> encode(Selector(labels={"app": "web", "tier": ""}))
        'data.metadata.labels["app"]=="web" && data.metadata.labels.contains("tier")'
    """
    clauses: list[str] = []

    if selector.filter.strip():
        clauses.append(selector.filter)

    if selector.kind and selector.api_version:
        clauses.append(DATA_TYPE.format(api_version=selector.api_version, kind=selector.kind))

    for wire, attribute, kind in ENCODER:
        clauses.extend(_clauses(wire, getattr(selector, attribute), kind))

    return CLAUSE_SEPARATOR.join(clauses)


def owned_by(uid: str) -> Selector:
    """Selector matching objects whose owner references contain ``uid``.

    Raises:
        SelectorError: If ``uid`` is empty, which would match everything
    """
    if not uid:
        raise SelectorError("owner UID must not be empty")
    return Selector(owner_references=[OwnerReference(uid=uid)])
