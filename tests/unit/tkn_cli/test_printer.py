"""Unit tests for list tables and object rendering."""

import json
from datetime import UTC, datetime

import pytest
import yaml
from rich.console import Console

from tkn_results.cli.printer import (
    MISSING,
    check_output_format,
    format_age,
    format_condition,
    format_duration,
    format_run_duration,
    list_table,
    render_object,
)
from tkn_results.core.errors import SelectorError

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)


def _render(table):
    console = Console(width=200, record=True)
    console.print(table)
    return console.export_text()


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [(0, "0s"), (59.6, "1m0s"), (75, "1m15s"), (3725, "1h2m5s")],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


class TestFormatAge:
    def test_units(self):
        assert format_age("2026-03-01T11:59:30Z", NOW) == "just now"
        assert format_age("2026-03-01T11:59:00Z", NOW) == "1 minute ago"
        assert format_age("2026-03-01T09:00:00Z", NOW) == "3 hours ago"
        assert format_age("2026-02-27T12:00:00Z", NOW) == "2 days ago"

    def test_missing_or_invalid(self):
        assert format_age(None, NOW) == MISSING
        assert format_age("yesterday", NOW) == MISSING


def test_format_run_duration():
    assert format_run_duration("2026-03-01T11:00:00Z", "2026-03-01T11:01:30Z") == "1m30s"
    assert format_run_duration("2026-03-01T11:00:00Z", None) == MISSING


class TestFormatCondition:
    def test_reason_wins(self):
        assert format_condition([{"status": "False", "reason": "Cancelled"}]) == "Cancelled"

    @pytest.mark.parametrize(
        ("status", "expected"),
        [("True", "Succeeded"), ("False", "Failed"), ("Unknown", "Running")],
    )
    def test_status_fallbacks(self, status, expected):
        assert format_condition([{"status": status}]) == expected

    def test_no_conditions(self):
        assert format_condition(None) == MISSING


class TestListTable:
    items = [
        {
            "metadata": {"name": "build-1", "uid": "u-1", "namespace": "ci"},
            "status": {
                "startTime": "2026-03-01T11:00:00Z",
                "completionTime": "2026-03-01T11:02:00Z",
                "conditions": [{"status": "True", "reason": "Succeeded"}],
            },
        },
        {"metadata": {"name": "build-2", "uid": "u-2", "namespace": "ci"}},
    ]

    def test_columns_and_rows(self):
        text = _render(list_table(self.items, now=NOW))

        header = text.splitlines()[0].split()
        assert header == ["NAME", "UID", "STARTED", "DURATION", "STATUS"]
        assert "build-1" in text
        assert "1 hour ago" in text
        assert "2m0s" in text
        assert "Succeeded" in text
        assert "NAMESPACE" not in text

    def test_namespace_column_with_all_namespaces(self):
        text = _render(list_table(self.items, all_namespaces=True, now=NOW))

        assert text.splitlines()[0].split()[0] == "NAMESPACE"


class TestRenderObject:
    obj = {"apiVersion": "tekton.dev/v1beta1", "kind": "PipelineRun", "metadata": {"name": "b"}}

    def test_yaml_keeps_key_order(self):
        rendered = render_object(self.obj, "yaml")

        assert yaml.safe_load(rendered) == self.obj
        assert rendered.startswith("apiVersion:")

    def test_json(self):
        assert json.loads(render_object(self.obj, "json")) == self.obj

    def test_unknown_format(self):
        with pytest.raises(SelectorError, match="output format 'wide'"):
            render_object(self.obj, "wide")

    def test_check_output_format(self):
        check_output_format(None)
        check_output_format("json")
        with pytest.raises(SelectorError):
            check_output_format("table")
