"""Paginated listing of stored objects.

Each call fetches one page; the caller drives the loop with the returned
``next_page_token``, or uses :func:`iter_pages`.
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from tkn_results.infra.results import ListRecordsRequest, Record, ResultsClient

from .errors import AmbiguousSelectorError, DecodeError
from .selector import Selector, encode

ORDER_BY = "update_time desc"


@dataclass
class ObjectList:
    """One page of decoded objects."""

    kind: str = ""
    api_version: str = ""
    items: list[dict[str, Any]] = field(default_factory=list)
    next_page_token: str = ""


def decode_record(record: Record) -> dict[str, Any]:
    """Decode a record's payload into a plain object.

    Raises:
        DecodeError: If the payload is not a JSON object
    """
    raw = record.data.value if record.data else b""
    try:
        obj = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"could not decode record {record.name}", details=str(e)) from e
    if not isinstance(obj, dict):
        raise DecodeError(
            f"could not decode record {record.name}",
            details=f"expected an object, got {type(obj).__name__}",
        )
    return obj


def list_records(client: ResultsClient, selector: Selector) -> ObjectList:
    """Fetch one page of objects matching ``selector``.

    Args:
        client: Results API transport
        selector: What to list; its ``continue_token`` selects the page

    Returns:
        Decoded objects and the token of the next page

    Raises:
        SelectorError: If the selector is invalid
        DecodeError: If any record on the page is malformed
        TransportError: If the call fails
    """
    selector.validate()
    request = ListRecordsRequest(
        parent=selector.parent,
        filter=encode(selector),
        order_by=ORDER_BY,
        page_size=selector.limit or 0,
        page_token=selector.continue_token,
    )
    logger.debug(f"Listing records under {request.parent} filter={request.filter!r}")
    response = client.list_records(request)

    items = [decode_record(r) for r in response.records]
    return ObjectList(
        kind=selector.kind,
        api_version=selector.api_version,
        items=items,
        next_page_token=response.next_page_token,
    )


def iter_pages(client: ResultsClient, selector: Selector) -> Iterator[ObjectList]:
    """Yield every page, advancing ``selector.continue_token`` between pages."""
    while True:
        page = list_records(client, selector)
        yield page
        if not page.next_page_token:
            return
        selector.continue_token = page.next_page_token


def single_object(objects: Sequence[dict[str, Any]], what: str = "resources") -> dict[str, Any] | None:
    """Return the only object in ``objects``.

    Returns:
        The object, or None when there are none

    Raises:
        AmbiguousSelectorError: If more than one object matched
    """
    if not objects:
        return None
    if len(objects) > 1:
        raise AmbiguousSelectorError(f"Multiple {what} found, narrow down with --uid flag.")
    return objects[0]
