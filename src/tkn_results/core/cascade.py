"""Cascading deletion across the Result, Record and Log graph.

Stored objects reference their backend entities through annotations (see
:mod:`tkn_results.core.annotations`). Deleting an object that owns a Result
first deletes every child owned by its UID, depth first, then its own
Record and Log, and finally the Result once nothing is left under it.
An object without a UID has no children to look up.

The Result check and its deletion are not atomic: a record created between
the two is orphaned. No conditional delete exists in the API.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Self

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tkn_results.infra.results import (
    DeleteLogRequest,
    DeleteRecordRequest,
    DeleteResultRequest,
    ListRecordsRequest,
    ResultsClient,
    TransportError,
    status,
)
from tkn_results.infra.results.errors import HTTP_NOT_FOUND

from . import annotations
from .errors import DecodeError
from .query import decode_record, iter_pages
from .selector import Selector, encode, owned_by


class ObjectMeta(BaseModel):
    """The part of a stored object's metadata the cascade reads."""

    model_config = ConfigDict(extra="ignore")

    uid: str = ""
    annotations: dict[str, str] = Field(default_factory=dict)


@dataclass
class CascadeNode:
    """One object to delete, described by its cross references.

    Attributes:
        uid: UID of the object; children reference it as owner
        result: Result the object owns, if any
        record: Record storing the object, if any
        log: Log stored for the object, if any
    """

    uid: str = ""
    result: str | None = None
    record: str | None = None
    log: str | None = None

    @classmethod
    def from_annotations(cls, uid: str, values: dict[str, str]) -> Self:
        return cls(
            uid=uid,
            result=values.get(annotations.RESULT) or None,
            record=values.get(annotations.RECORD) or None,
            log=values.get(annotations.LOG) or None,
        )

    @classmethod
    def from_object(cls, obj: dict[str, Any], fallback: dict[str, str] | None = None) -> Self:
        """Build a node from a decoded object.

        Args:
            obj: Decoded object with ``metadata``
            fallback: Backend-level annotations used for keys the object lacks

        Raises:
            DecodeError: If ``metadata`` is not shaped like object metadata
        """
        try:
            meta = ObjectMeta.model_validate(obj.get("metadata") or {})
        except ValidationError as e:
            raise DecodeError("object metadata is malformed", details=str(e)) from e
        merged = dict(fallback or {})
        merged.update(meta.annotations)
        return cls.from_annotations(meta.uid, merged)


def _tolerate_missing(operation: Callable[[], None], what: str) -> None:
    try:
        operation()
    except TransportError as e:
        if status(e) != HTTP_NOT_FOUND:
            raise
        logger.debug(f"{what} already gone")


def cascade_delete(client: ResultsClient, node: CascadeNode) -> None:
    """Delete ``node`` and everything it owns.

    Args:
        client: Results API transport
        node: Object to delete

    Raises:
        TransportError: On any failure other than "not found"
        DecodeError: If a child record is malformed
    """
    if node.result and node.uid:
        children = encode(owned_by(node.uid))
        page_token = ""
        while True:
            response = client.list_records(
                ListRecordsRequest(parent=node.result, filter=children, page_token=page_token)
            )
            for stored in response.records:
                child = CascadeNode.from_object(decode_record(stored), stored.annotations)
                logger.debug(f"Deleting child {stored.name} of {node.uid}")
                cascade_delete(client, child)
            if not response.next_page_token:
                break
            page_token = response.next_page_token

    if record := node.record:
        _tolerate_missing(lambda: client.delete_record(DeleteRecordRequest(name=record)), record)
        logger.info(f"Deleted record {record}")

    if log := node.log:
        _tolerate_missing(lambda: client.delete_log(DeleteLogRequest(name=log)), log)
        logger.debug(f"Deleted log {log}")

    if result := node.result:
        remaining = client.list_records(ListRecordsRequest(parent=result))
        if remaining.records:
            logger.debug(f"Keeping result {result}: {len(remaining.records)} record(s) left")
            return
        _tolerate_missing(lambda: client.delete_result(DeleteResultRequest(name=result)), result)
        logger.info(f"Deleted result {result}")


def delete_matching(
    client: ResultsClient,
    selector: Selector,
    on_deleted: Callable[[dict[str, Any]], None] | None = None,
) -> int:
    """Cascade-delete every object matching ``selector``.

    Args:
        client: Results API transport
        selector: What to delete
        on_deleted: Called with each object after it is deleted

    Returns:
        Number of objects deleted
    """
    count = 0
    for page in iter_pages(client, selector):
        for obj in page.items:
            cascade_delete(client, CascadeNode.from_object(obj))
            count += 1
            if on_deleted is not None:
                on_deleted(obj)
    return count
