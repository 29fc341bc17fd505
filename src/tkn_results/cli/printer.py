"""Rendering of stored objects: list tables and full-object dumps."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

import yaml
from rich.table import Table

from tkn_results.core.errors import SelectorError

OUTPUT_FORMATS = ("yaml", "json")
MISSING = "---"


def _parse_time(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def format_duration(seconds: float) -> str:
    """Go-style duration rounded to seconds, e.g. ``1h2m3s``."""
    total = int(round(seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{minutes}m{secs}s"
    return f"{secs}s"


def format_age(start: str | None, now: datetime | None = None) -> str:
    started = _parse_time(start)
    if started is None:
        return MISSING
    now = now or datetime.now(UTC)
    seconds = max((now - started).total_seconds(), 0)
    for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds >= size:
            count = int(seconds // size)
            return f"{count} {unit}{'s' if count != 1 else ''} ago"
    return "just now"


def format_run_duration(start: str | None, end: str | None) -> str:
    started, completed = _parse_time(start), _parse_time(end)
    if started is None or completed is None:
        return MISSING
    return format_duration((completed - started).total_seconds())


def format_condition(conditions: list[dict[str, Any]] | None) -> str:
    if not conditions:
        return MISSING
    condition = conditions[0]
    reason = condition.get("reason") or ""
    match condition.get("status"):
        case "True":
            return reason or "Succeeded"
        case "False":
            return reason or "Failed"
        case _:
            return reason or "Running"


def list_table(
    items: list[dict[str, Any]], *, all_namespaces: bool = False, now: datetime | None = None
) -> Table:
    """Build the NAME/UID/STARTED/DURATION/STATUS table for a page."""
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    if all_namespaces:
        table.add_column("NAMESPACE")
    for column in ("NAME", "UID", "STARTED", "DURATION", "STATUS"):
        table.add_column(column, no_wrap=True)

    for item in items:
        metadata = item.get("metadata") or {}
        status = item.get("status") or {}
        row = [
            metadata.get("name", ""),
            metadata.get("uid", ""),
            format_age(status.get("startTime"), now),
            format_run_duration(status.get("startTime"), status.get("completionTime")),
            format_condition(status.get("conditions")),
        ]
        if all_namespaces:
            row.insert(0, metadata.get("namespace", ""))
        table.add_row(*row)
    return table


def check_output_format(output: str | None) -> None:
    """Reject unknown output formats before any call is made."""
    if output is not None:
        render_object({}, output)


def render_object(obj: dict[str, Any], output: str) -> str:
    """Serialize one object as YAML or JSON.

    Raises:
        SelectorError: If ``output`` is not a supported format
    """
    match output:
        case "yaml":
            return yaml.safe_dump(obj, default_flow_style=False, sort_keys=False)
        case "json":
            return json.dumps(obj, indent=2) + "\n"
        case _:
            raise SelectorError(
                f"unable to match a printer suitable for the output format {output!r}",
                details=f"allowed formats are: {', '.join(OUTPUT_FORMATS)}",
            )
