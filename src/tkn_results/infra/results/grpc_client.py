"""gRPC implementation of ResultsClient.

Holds one long-lived channel to the Results API. Every call carries the
bearer token and impersonation metadata through ``AuthInterceptor``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any, Self
from urllib.parse import urlsplit

import grpc
from loguru import logger

from . import proto as pb
from .client import (
    ClientConfig,
    DeleteLogRequest,
    DeleteRecordRequest,
    DeleteResultRequest,
    GetLogRequest,
    GetRecordRequest,
    GetResultRequest,
    ListRecordsRequest,
    ListRecordsResponse,
    ListResultsRequest,
    ListResultsResponse,
    LogChunk,
    Record,
    RecordData,
    Result,
)
from .credentials import AuthInterceptor, grpc_metadata
from .errors import ResultsError, UnsupportedOperationError, from_rpc_error

DEFAULT_PORTS = {"https": 443, "http": 80}


# =============================================================================
# Channel Construction
# =============================================================================


def channel_target(host: str) -> tuple[str, bool]:
    """Resolve a host URL into a ``host:port`` dial target.

    Args:
        host: URL such as ``https://results.example.com``

    Returns:
        Tuple of (target, secure)

    Raises:
        ResultsError: If neither a port nor a known scheme is present
    """
    url = urlsplit(host if "//" in host else f"//{host}")
    secure = url.scheme == "https"
    if url.port:
        return f"{url.hostname}:{url.port}", secure
    port = DEFAULT_PORTS.get(url.scheme)
    if port is None:
        raise ResultsError("port or scheme missing in host", details=host)
    return f"{url.hostname}:{port}", secure


def _read(path: str, what: str) -> bytes | None:
    if not path:
        return None
    try:
        return Path(path).expanduser().read_bytes()
    except OSError as e:
        raise ResultsError(f"could not read {what}", details=str(e)) from e


def create_channel(config: ClientConfig) -> grpc.Channel:
    """Dial the Results API and wrap the channel with auth metadata.

    ``http://`` hosts get an insecure channel; ``https://`` hosts get SSL
    channel credentials from the configured CA and client key pair. The server
    certificate is always verified on ``https://`` hosts.
    """
    target, secure = channel_target(config.host)
    options: list[tuple[str, Any]] = []

    if secure:
        tls = config.tls
        if tls.insecure:
            logger.debug(
                "insecure-skip-tls-verify is ignored for gRPC; the server certificate is verified"
            )
        root = _read(tls.ca_file, "CA certificate")
        key = _read(tls.key_file, "client key") if tls.cert_file else None
        chain = _read(tls.cert_file, "client certificate") if tls.key_file else None
        if tls.server_name:
            options.append(("grpc.ssl_target_name_override", tls.server_name))
        credentials = grpc.ssl_channel_credentials(
            root_certificates=root,
            private_key=key,
            certificate_chain=chain,
        )
        channel = grpc.secure_channel(target, credentials, options=options)
    else:
        channel = grpc.insecure_channel(target, options=options)

    logger.debug(f"Opened {'secure' if secure else 'insecure'} gRPC channel to {target}")
    metadata = grpc_metadata(config.token, config.impersonation)
    return grpc.intercept_channel(channel, AuthInterceptor(metadata))


# =============================================================================
# Message Conversion
# =============================================================================


def _record(message: Any) -> Record:
    data = None
    if message.HasField("data"):
        data = RecordData(type=message.data.type, value=message.data.value)
    return Record(name=message.name, id=message.id, data=data, etag=message.etag)


def _result(message: Any) -> Result:
    return Result(
        name=message.name,
        id=message.id,
        annotations=dict(message.annotations),
        etag=message.etag,
    )


def _list_request(message_class: Any, request: ListRecordsRequest | ListResultsRequest) -> Any:
    return message_class(
        parent=request.parent,
        filter=request.filter,
        order_by=request.order_by,
        page_size=request.page_size,
        page_token=request.page_token,
    )


# =============================================================================
# Client
# =============================================================================


class GRPCClient:
    """Results API client speaking gRPC.

    Example:
        with GRPCClient(ClientConfig(host="https://results:8080", client_type=ClientType.GRPC)) as c:
            c.delete_record(DeleteRecordRequest(name="default/results/abc/records/def"))
    """

    def __init__(self, config: ClientConfig, channel: grpc.Channel | None = None) -> None:
        self.config = config
        self._channel = channel if channel is not None else create_channel(config)
        self._timeout = config.timeout or None

        results = pb.RESULTS_SERVICE
        logs = pb.LOGS_SERVICE
        self._get_result = self._unary(results, "GetResult", pb.Result)
        self._list_results = self._unary(results, "ListResults", pb.ListResultsResponse)
        self._delete_result = self._unary(results, "DeleteResult", pb.Empty)
        self._get_record = self._unary(results, "GetRecord", pb.Record)
        self._list_records = self._unary(results, "ListRecords", pb.ListRecordsResponse)
        self._delete_record = self._unary(results, "DeleteRecord", pb.Empty)
        self._list_logs = self._unary(logs, "ListLogs", pb.ListRecordsResponse)
        self._delete_log = self._unary(logs, "DeleteLog", pb.Empty)
        self._get_log = self._channel.unary_stream(
            f"/{logs}/GetLog",
            request_serializer=_serialize,
            response_deserializer=pb.HttpBody.FromString,
        )

    def _unary(self, service: str, method: str, response: Any) -> Callable[..., Any]:
        return self._channel.unary_unary(
            f"/{service}/{method}",
            request_serializer=_serialize,
            response_deserializer=response.FromString,
        )

    def _call(self, operation: str, stub: Callable[..., Any], request: Any) -> Any:
        logger.debug(f"gRPC {operation}: {request}")
        try:
            return stub(request, timeout=self._timeout)
        except grpc.RpcError as e:
            raise from_rpc_error(e, operation) from e

    # -------------------------------------------------------------------------
    # Results
    # -------------------------------------------------------------------------

    def get_result(self, request: GetResultRequest) -> Result:
        reply = self._call("GetResult", self._get_result, pb.GetResultRequest(name=request.name))
        return _result(reply)

    def list_results(self, request: ListResultsRequest) -> ListResultsResponse:
        reply = self._call(
            "ListResults", self._list_results, _list_request(pb.ListResultsRequest, request)
        )
        return ListResultsResponse(
            results=[_result(r) for r in reply.results],
            next_page_token=reply.next_page_token,
        )

    def delete_result(self, request: DeleteResultRequest) -> None:
        self._call("DeleteResult", self._delete_result, pb.DeleteResultRequest(name=request.name))

    def create_result(self, request: Any) -> Result:
        raise UnsupportedOperationError("CreateResult")

    def update_result(self, request: Any) -> Result:
        raise UnsupportedOperationError("UpdateResult")

    # -------------------------------------------------------------------------
    # Records
    # -------------------------------------------------------------------------

    def get_record(self, request: GetRecordRequest) -> Record:
        reply = self._call("GetRecord", self._get_record, pb.GetRecordRequest(name=request.name))
        return _record(reply)

    def list_records(self, request: ListRecordsRequest) -> ListRecordsResponse:
        reply = self._call(
            "ListRecords", self._list_records, _list_request(pb.ListRecordsRequest, request)
        )
        return ListRecordsResponse(
            records=[_record(r) for r in reply.records],
            next_page_token=reply.next_page_token,
        )

    def delete_record(self, request: DeleteRecordRequest) -> None:
        self._call("DeleteRecord", self._delete_record, pb.DeleteRecordRequest(name=request.name))

    def create_record(self, request: Any) -> Record:
        raise UnsupportedOperationError("CreateRecord")

    def update_record(self, request: Any) -> Record:
        raise UnsupportedOperationError("UpdateRecord")

    # -------------------------------------------------------------------------
    # Logs
    # -------------------------------------------------------------------------

    def get_log(self, request: GetLogRequest) -> Iterator[LogChunk]:
        logger.debug(f"gRPC GetLog: {request.name}")
        stream = self._get_log(pb.GetLogRequest(name=request.name), timeout=self._timeout)
        return self._chunks(stream)

    @staticmethod
    def _chunks(stream: Iterator[Any]) -> Iterator[LogChunk]:
        try:
            for body in stream:
                yield LogChunk(data=body.data, content_type=body.content_type)
        except grpc.RpcError as e:
            raise from_rpc_error(e, "GetLog") from e

    def list_logs(self, request: ListRecordsRequest) -> ListRecordsResponse:
        reply = self._call(
            "ListLogs", self._list_logs, _list_request(pb.ListRecordsRequest, request)
        )
        return ListRecordsResponse(
            records=[_record(r) for r in reply.records],
            next_page_token=reply.next_page_token,
        )

    def delete_log(self, request: DeleteLogRequest) -> None:
        self._call("DeleteLog", self._delete_log, pb.DeleteLogRequest(name=request.name))

    def update_log(self, request: Any) -> Any:
        raise UnsupportedOperationError("UpdateLog")

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        self._channel.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _serialize(message: Any) -> bytes:
    return message.SerializeToString()
