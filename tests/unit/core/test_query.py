"""Unit tests for paginated listing."""

import pytest

from tkn_results.core.errors import AmbiguousSelectorError, DecodeError, SelectorError
from tkn_results.core.query import ORDER_BY, iter_pages, list_records, single_object
from tkn_results.core.selector import Selector
from tkn_results.infra.results import TransportError
from tests.fixtures import make_run


def _seed(fake_client, count, namespace="default"):
    for i in range(count):
        fake_client.add_run(make_run(f"run-{i}", f"uid-{i}", namespace=namespace))


class TestListRecords:
    def test_builds_request_from_selector(self, fake_client):
        selector = Selector(
            name="build",
            namespace="ci",
            kind="PipelineRun",
            api_version="tekton.dev/v1beta1",
            limit=5,
            continue_token="10",
        )

        list_records(fake_client, selector)

        (request,) = fake_client.operations("ListRecords")
        assert request.parent == "ci/results/-"
        assert request.filter == (
            'data_type=="tekton.dev/v1beta1.PipelineRun"'
            ' && data.metadata.name.contains("build")'
            ' && data.metadata.namespace.contains("ci")'
        )
        assert request.order_by == ORDER_BY == "update_time desc"
        assert request.page_size == 5
        assert request.page_token == "10"

    def test_empty_namespace_searches_everywhere(self, fake_client):
        list_records(fake_client, Selector())

        (request,) = fake_client.operations("ListRecords")
        assert request.parent == "-/results/-"
        assert request.filter == ""

    def test_decodes_items_and_token(self, fake_client):
        _seed(fake_client, 7)

        page = list_records(fake_client, Selector(kind="PipelineRun", limit=5))

        assert [i["metadata"]["name"] for i in page.items] == [f"run-{i}" for i in range(5)]
        assert page.next_page_token == "5"
        assert page.kind == "PipelineRun"

    def test_invalid_limit_never_reaches_the_server(self, fake_client):
        with pytest.raises(SelectorError):
            list_records(fake_client, Selector(limit=1))

        assert fake_client.calls == []

    def test_malformed_payload_fails_the_whole_page(self, fake_client):
        _seed(fake_client, 2)
        fake_client.add_raw_record("default/results/x/records/bad", b"{not json")

        with pytest.raises(DecodeError, match="default/results/x/records/bad"):
            list_records(fake_client, Selector())

    def test_non_object_payload_is_a_decode_error(self, fake_client):
        fake_client.add_raw_record("default/results/x/records/list", b"[1, 2]")

        with pytest.raises(DecodeError):
            list_records(fake_client, Selector())

    def test_transport_errors_propagate(self, fake_client):
        fake_client.fail_on["ListRecords"] = TransportError("ListRecords failed", status_code=404)

        with pytest.raises(TransportError) as excinfo:
            list_records(fake_client, Selector())

        assert excinfo.value.status_code == 404


class TestIterPages:
    def test_concatenated_pages_equal_the_full_listing(self, fake_client):
        _seed(fake_client, 12)
        selector = Selector(limit=5)

        pages = list(iter_pages(fake_client, selector))

        assert [len(p.items) for p in pages] == [5, 5, 2]
        names = [i["metadata"]["name"] for p in pages for i in p.items]
        assert names == [f"run-{i}" for i in range(12)]
        assert pages[-1].next_page_token == ""

    def test_advances_the_selector_cursor(self, fake_client):
        _seed(fake_client, 6)
        selector = Selector(limit=5)

        list(iter_pages(fake_client, selector))

        tokens = [r.page_token for r in fake_client.operations("ListRecords")]
        assert tokens == ["", "5"]
        assert selector.continue_token == "5"

    def test_single_empty_page(self, fake_client):
        pages = list(iter_pages(fake_client, Selector()))

        assert len(pages) == 1
        assert pages[0].items == []


class TestSingleObject:
    def test_none_when_empty(self):
        assert single_object([]) is None

    def test_returns_the_only_item(self):
        assert single_object([{"a": 1}]) == {"a": 1}

    def test_more_than_one_is_ambiguous(self):
        with pytest.raises(AmbiguousSelectorError, match="Multiple PipelineRuns found"):
            single_object([{}, {}], "PipelineRuns")
