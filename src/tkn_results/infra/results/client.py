"""Results API client interface.

Defines the contract for Results API operations that can be implemented
by different transports (gRPC channel, grpc-gateway REST bridge).
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Protocol, Self

from .errors import TransportError

# =============================================================================
# Configuration
# =============================================================================


class ClientType(StrEnum):
    """Transport used to reach the Results API."""

    GRPC = "GRPC"
    REST = "REST"


@dataclass
class TLSConfig:
    """TLS material handed to the transport library as-is."""

    insecure: bool = False
    ca_file: str = ""
    cert_file: str = ""
    key_file: str = ""
    server_name: str = ""


@dataclass
class ImpersonationConfig:
    """Identity to act as on every call."""

    user: str = ""
    uid: str = ""
    groups: list[str] = field(default_factory=list)
    extra: dict[str, list[str]] = field(default_factory=dict)


@dataclass
class ClientConfig:
    """Everything a transport needs to connect.

    Attributes:
        host: Base URL of the Results API (scheme decides TLS)
        client_type: Transport variant to construct
        api_path: Path prefix of the REST bridge
        timeout: Per-call deadline in seconds (0 disables it)
        token: Bearer token attached to every call
    """

    host: str
    client_type: ClientType = ClientType.REST
    api_path: str = "/apis/results.tekton.dev/v1alpha2"
    timeout: float = 10.0
    token: str = ""
    tls: TLSConfig = field(default_factory=TLSConfig)
    impersonation: ImpersonationConfig = field(default_factory=ImpersonationConfig)


# =============================================================================
# Resources
# =============================================================================


def _pick(payload: dict[str, Any], camel: str, snake: str, default: Any = "") -> Any:
    """Read a JSON field that may be spelled in camelCase or snake_case."""
    if camel in payload:
        return payload[camel]
    return payload.get(snake, default)


@dataclass
class RecordData:
    """Typed opaque payload of a Record."""

    type: str = ""
    value: bytes = b""

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> Self:
        raw = payload.get("value") or ""
        try:
            value = base64.b64decode(raw, validate=True)
        except binascii.Error as e:
            raise TransportError("record data is not valid base64", details=str(e)) from e
        return cls(type=payload.get("type", ""), value=value)


@dataclass
class Record:
    """One stored execution object (e.g. a PipelineRun)."""

    name: str
    id: str = ""
    uid: str = ""
    data: RecordData | None = None
    etag: str = ""
    annotations: dict[str, str] = field(default_factory=dict)
    create_time: str = ""
    update_time: str = ""

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> Self:
        data = payload.get("data")
        return cls(
            name=payload.get("name", ""),
            id=payload.get("id", ""),
            uid=payload.get("uid", ""),
            data=RecordData.from_json(data) if data else None,
            etag=payload.get("etag", ""),
            annotations=dict(payload.get("annotations") or {}),
            create_time=_pick(payload, "createTime", "create_time"),
            update_time=_pick(payload, "updateTime", "update_time"),
        )


@dataclass
class Result:
    """Parent grouping entity owning zero or more Records."""

    name: str
    id: str = ""
    uid: str = ""
    annotations: dict[str, str] = field(default_factory=dict)
    etag: str = ""

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> Self:
        return cls(
            name=payload.get("name", ""),
            id=payload.get("id", ""),
            uid=payload.get("uid", ""),
            annotations=dict(payload.get("annotations") or {}),
            etag=payload.get("etag", ""),
        )


@dataclass
class LogChunk:
    """One piece of a log stream."""

    data: bytes = b""
    content_type: str = ""


# =============================================================================
# Requests and Responses
# =============================================================================


@dataclass
class GetResultRequest:
    name: str


@dataclass
class DeleteResultRequest:
    name: str


@dataclass
class ListResultsRequest:
    parent: str
    filter: str = ""
    order_by: str = ""
    page_size: int = 0
    page_token: str = ""


@dataclass
class ListResultsResponse:
    results: list[Result] = field(default_factory=list)
    next_page_token: str = ""

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> Self:
        return cls(
            results=[Result.from_json(r) for r in payload.get("results") or []],
            next_page_token=_pick(payload, "nextPageToken", "next_page_token"),
        )


@dataclass
class GetRecordRequest:
    name: str


@dataclass
class DeleteRecordRequest:
    name: str


@dataclass
class ListRecordsRequest:
    """List Records under a parent.

    ``parent`` is ``<namespace>/results/<result>``; either segment may be
    the ``-`` wildcard.
    """

    parent: str
    filter: str = ""
    order_by: str = ""
    page_size: int = 0
    page_token: str = ""


@dataclass
class ListRecordsResponse:
    records: list[Record] = field(default_factory=list)
    next_page_token: str = ""

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> Self:
        return cls(
            records=[Record.from_json(r) for r in payload.get("records") or []],
            next_page_token=_pick(payload, "nextPageToken", "next_page_token"),
        )


@dataclass
class GetLogRequest:
    name: str


@dataclass
class DeleteLogRequest:
    name: str


# =============================================================================
# Client Interface
# =============================================================================


class ResultsClient(Protocol):
    """Read/delete capability set shared by every transport.

    Successful calls return the reply value; failures raise
    ``TransportError`` whose ``status_code`` is the HTTP-equivalent code.
    Create and update calls raise ``UnsupportedOperationError``.

    Example:
        from tkn_results.infra.results import new_client

        with new_client(config) as client:
            page = client.list_records(ListRecordsRequest(parent="default/results/-"))
    """

    # -------------------------------------------------------------------------
    # Results
    # -------------------------------------------------------------------------

    def get_result(self, request: GetResultRequest) -> Result: ...

    def list_results(self, request: ListResultsRequest) -> ListResultsResponse: ...

    def delete_result(self, request: DeleteResultRequest) -> None: ...

    def create_result(self, request: Any) -> Result: ...

    def update_result(self, request: Any) -> Result: ...

    # -------------------------------------------------------------------------
    # Records
    # -------------------------------------------------------------------------

    def get_record(self, request: GetRecordRequest) -> Record: ...

    def list_records(self, request: ListRecordsRequest) -> ListRecordsResponse: ...

    def delete_record(self, request: DeleteRecordRequest) -> None: ...

    def create_record(self, request: Any) -> Record: ...

    def update_record(self, request: Any) -> Record: ...

    # -------------------------------------------------------------------------
    # Logs
    # -------------------------------------------------------------------------

    def get_log(self, request: GetLogRequest) -> Iterator[LogChunk]:
        """Fetch a log as a stream of chunks.

        The REST bridge always yields exactly one chunk; gRPC may yield
        several. Callers must concatenate.
        """
        ...

    def list_logs(self, request: ListRecordsRequest) -> ListRecordsResponse: ...

    def delete_log(self, request: DeleteLogRequest) -> None: ...

    def update_log(self, request: Any) -> Any: ...

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None: ...

    def __enter__(self) -> Self: ...

    def __exit__(self, *exc_info: object) -> None: ...
