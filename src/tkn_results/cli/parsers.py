"""Parsers for selector flags and ``key=value`` arguments."""

from __future__ import annotations

import re

from tkn_results.core.selector import OwnerReference

_SELECTOR_SEPARATOR = re.compile(r"={1,2}")

# Owner reference keys as written on the command line
_OWNER_KEYS = {
    "apiVersion": "api_version",
    "kind": "kind",
    "name": "name",
    "uid": "uid",
}


def parse_selector(value: str | None) -> dict[str, str]:
    """Parse ``k=v, k2==v2, k3`` into a map; a bare key maps to ``""``.

    Spaces are ignored.
    """
    if not value or not value.strip():
        return {}
    result: dict[str, str] = {}
    for selector in value.replace(" ", "").split(","):
        if not selector:
            continue
        parts = _SELECTOR_SEPARATOR.split(selector, maxsplit=1)
        result[parts[0]] = parts[1] if len(parts) == 2 else ""
    return result


def parse_finalizers(value: str | None) -> list[str]:
    if not value or not value.strip():
        return []
    return [f for f in value.replace(" ", "").split(",") if f]


def parse_owner_references(value: str | None) -> list[OwnerReference]:
    """Parse ``kind=A name=B, uid=C`` into owner references.

    References are separated by commas; fields of one reference by spaces.
    Unknown keys are ignored.
    """
    if not value or not value.strip():
        return []
    references: list[OwnerReference] = []
    for group in value.split(","):
        reference = OwnerReference()
        for pair in group.split():
            key, sep, field_value = pair.partition("=")
            if sep and key in _OWNER_KEYS:
                setattr(reference, _OWNER_KEYS[key], field_value)
        references.append(reference)
    return references


def parse_args(args: list[str] | None) -> dict[str, str] | None:
    """Parse ``key=value`` arguments, dropping double quotes.

    Returns:
        The map, or None when there are no arguments
    """
    if not args:
        return None
    result: dict[str, str] = {}
    for arg in args:
        key, _, value = arg.replace('"', "").partition("=")
        result[key] = value
    return result
