"""Log lookup and retrieval for stored objects."""

from __future__ import annotations

from typing import Any

from loguru import logger

from tkn_results.infra.results import GetLogRequest, ResultsClient

from . import annotations


def log_name(obj: dict[str, Any]) -> str | None:
    """Name of the log stored for ``obj``, or None if it has none.

    Uses the log annotation when present; otherwise derives the name from
    the record annotation, since logs live beside records under the same
    Result (``.../records/<id>`` becomes ``.../logs/<id>``).
    """
    values = (obj.get("metadata") or {}).get("annotations") or {}
    if name := values.get(annotations.LOG):
        return name
    if record := values.get(annotations.RECORD):
        return record.replace("records", "logs")
    return None


def fetch_log(client: ResultsClient, name: str) -> bytes:
    """Download a whole log.

    Raises:
        TransportError: If the log cannot be fetched
    """
    logger.debug(f"Fetching log {name}")
    return b"".join(chunk.data for chunk in client.get_log(GetLogRequest(name=name)))
