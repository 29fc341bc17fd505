"""Unit tests for the gRPC transport."""

import grpc
import pytest
from loguru import logger

from tkn_results.infra.results import (
    ClientConfig,
    ClientType,
    DeleteRecordRequest,
    GetLogRequest,
    ListRecordsRequest,
    TransportError,
    UnsupportedOperationError,
)
from tkn_results.infra.results import proto as pb
from tkn_results.infra.results.errors import ResultsError
from tkn_results.infra.results.client import TLSConfig
from tkn_results.infra.results.grpc_client import GRPCClient, channel_target, create_channel
from tests.fixtures import FakeRpcError


class FakeStub:
    def __init__(self, path, serializer, deserializer):
        self.path = path
        self.serializer = serializer
        self.deserializer = deserializer
        self.requests = []
        self.timeouts = []
        self.reply = None
        self.error = None

    def __call__(self, request, timeout=None):
        # Round-trip through the wire encoding like a real channel does
        self.requests.append(type(request).FromString(self.serializer(request)))
        self.timeouts.append(timeout)
        if self.error is not None:
            raise self.error
        if isinstance(self.reply, list):
            return iter(self.reply)
        return self.deserializer(self.reply.SerializeToString())


class FakeChannel:
    def __init__(self):
        self.stubs = {}
        self.closed = False

    def _stub(self, path, request_serializer, response_deserializer):
        stub = FakeStub(path, request_serializer, response_deserializer)
        self.stubs[path.rsplit("/", 1)[1]] = stub
        return stub

    unary_unary = _stub
    unary_stream = _stub

    def close(self):
        self.closed = True


@pytest.fixture
def channel():
    return FakeChannel()


@pytest.fixture
def client(channel):
    return GRPCClient(
        ClientConfig(host="https://results:8080", client_type=ClientType.GRPC, timeout=5),
        channel=channel,
    )


class TestChannelTarget:
    def test_explicit_port(self):
        assert channel_target("https://results.example.com:8080") == (
            "results.example.com:8080",
            True,
        )

    def test_scheme_default_ports(self):
        assert channel_target("https://results.example.com") == ("results.example.com:443", True)
        assert channel_target("http://results.example.com") == ("results.example.com:80", False)

    def test_bare_host_with_port_is_insecure(self):
        assert channel_target("localhost:50051") == ("localhost:50051", False)

    def test_neither_port_nor_scheme(self):
        with pytest.raises(ResultsError, match="port or scheme missing"):
            channel_target("results.example.com")


class TestCreateChannel:
    def test_https_host_verifies_even_when_insecure_is_set(self, monkeypatch):
        opened = []
        monkeypatch.setattr(
            grpc,
            "secure_channel",
            lambda target, credentials, options=None: opened.append(target) or FakeChannel(),
        )
        monkeypatch.setattr(grpc, "intercept_channel", lambda channel, *interceptors: channel)
        messages = []
        sink = logger.add(messages.append, level="DEBUG", format="{message}")
        try:
            create_channel(ClientConfig(host="https://results:8080", tls=TLSConfig(insecure=True)))
        finally:
            logger.remove(sink)

        assert opened == ["results:8080"]
        assert any("insecure-skip-tls-verify is ignored" in m for m in messages)

    def test_http_host_uses_a_plaintext_channel(self, monkeypatch):
        opened = []
        monkeypatch.setattr(
            grpc,
            "insecure_channel",
            lambda target, options=None: opened.append(target) or FakeChannel(),
        )
        monkeypatch.setattr(grpc, "intercept_channel", lambda channel, *interceptors: channel)

        create_channel(ClientConfig(host="http://results:8080"))

        assert opened == ["results:8080"]


class TestCalls:
    def test_methods_use_fully_qualified_paths(self, channel, client):
        assert channel.stubs["ListRecords"].path == "/tekton.results.v1alpha2.Results/ListRecords"
        assert channel.stubs["GetLog"].path == "/tekton.results.v1alpha2.Logs/GetLog"

    def test_list_records_converts_both_ways(self, channel, client):
        stub = channel.stubs["ListRecords"]
        stub.reply = pb.ListRecordsResponse(
            records=[
                pb.Record(
                    name="default/results/r/records/x",
                    id="x-id",
                    data=pb.Any_(type="tekton.dev/v1beta1.TaskRun", value=b'{"a": 1}'),
                )
            ],
            next_page_token="next",
        )

        response = client.list_records(
            ListRecordsRequest(
                parent="default/results/-",
                filter='data_type=="tekton.dev/v1beta1.TaskRun"',
                order_by="update_time desc",
                page_size=10,
                page_token="tok",
            )
        )

        (sent,) = stub.requests
        assert sent.parent == "default/results/-"
        assert sent.filter == 'data_type=="tekton.dev/v1beta1.TaskRun"'
        assert sent.order_by == "update_time desc"
        assert sent.page_size == 10
        assert sent.page_token == "tok"
        assert stub.timeouts == [5]

        (record,) = response.records
        assert record.name == "default/results/r/records/x"
        assert record.id == "x-id"
        assert record.data.type == "tekton.dev/v1beta1.TaskRun"
        assert record.data.value == b'{"a": 1}'
        assert response.next_page_token == "next"

    def test_record_without_data(self, channel, client):
        channel.stubs["ListRecords"].reply = pb.ListRecordsResponse(
            records=[pb.Record(name="n")]
        )

        response = client.list_records(ListRecordsRequest(parent="-/results/-"))

        assert response.records[0].data is None

    def test_delete_sends_the_name(self, channel, client):
        stub = channel.stubs["DeleteRecord"]
        stub.reply = pb.Empty()

        client.delete_record(DeleteRecordRequest(name="default/results/r/records/x"))

        assert stub.requests[0].name == "default/results/r/records/x"

    def test_rpc_errors_become_transport_errors(self, channel, client):
        channel.stubs["DeleteRecord"].error = FakeRpcError(grpc.StatusCode.NOT_FOUND, "gone")

        with pytest.raises(TransportError) as excinfo:
            client.delete_record(DeleteRecordRequest(name="default/results/r/records/x"))

        assert excinfo.value.not_found
        assert excinfo.value.details == "gone"

    def test_log_stream_yields_every_chunk(self, channel, client):
        channel.stubs["GetLog"].reply = [
            pb.HttpBody(content_type="text/plain", data=b"one\n"),
            pb.HttpBody(content_type="text/plain", data=b"two\n"),
        ]

        chunks = list(client.get_log(GetLogRequest(name="default/results/r/logs/x")))

        assert [c.data for c in chunks] == [b"one\n", b"two\n"]

    def test_log_stream_errors_are_mapped(self, channel, client):
        def broken():
            yield pb.HttpBody(data=b"partial")
            raise FakeRpcError(grpc.StatusCode.UNAVAILABLE)

        client_stream = client._chunks(broken())

        assert next(client_stream).data == b"partial"
        with pytest.raises(TransportError) as excinfo:
            next(client_stream)
        assert excinfo.value.status_code == 503

    def test_writes_are_unsupported(self, client):
        with pytest.raises(UnsupportedOperationError):
            client.create_record(object())

    def test_close_closes_the_channel(self, channel, client):
        with client:
            pass

        assert channel.closed
