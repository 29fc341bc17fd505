"""REST implementation of ResultsClient.

Talks to the grpc-gateway HTTP/JSON bridge of the Results API through one
pooled ``httpx.Client``.
"""

from __future__ import annotations

import base64
import binascii
import json
import ssl
from collections.abc import Iterator
from dataclasses import dataclass, fields
from typing import Any, Self

import httpx
from loguru import logger

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
    Result,
    TLSConfig,
)
from .credentials import auth_headers
from .errors import (
    HTTP_INTERNAL_ERROR,
    ResultsError,
    TransportError,
    UnsupportedOperationError,
    http_status_from_code,
)

HTTP_SERVICE_UNAVAILABLE = 503
HTTP_GATEWAY_TIMEOUT = 504


@dataclass(frozen=True)
class Route:
    """HTTP mapping of one RPC.

    Attributes:
        method: HTTP verb
        routing: Request field substituted into the URL path
        suffix: Collection segment appended after the routing value
    """

    method: str
    routing: str
    suffix: str = ""


ROUTES: dict[str, Route] = {
    "GetResult": Route("GET", "name"),
    "ListResults": Route("GET", "parent", "results"),
    "DeleteResult": Route("DELETE", "name"),
    "GetRecord": Route("GET", "name"),
    "ListRecords": Route("GET", "parent", "records"),
    "DeleteRecord": Route("DELETE", "name"),
    "GetLog": Route("GET", "name"),
    "ListLogs": Route("GET", "parent", "logs"),
    "DeleteLog": Route("DELETE", "name"),
}


def query_params(request: Any, routing: str) -> dict[str, str]:
    """Collect the request fields that travel as query parameters.

    The routing field, ``bytes`` fields and empty values are skipped.
    """
    params: dict[str, str] = {}
    for f in fields(request):
        value = getattr(request, f.name)
        if f.name == routing or isinstance(value, bytes) or value in ("", 0, None):
            continue
        params[f.name] = str(value)
    return params


def _stream_error(error: dict[str, Any]) -> TransportError:
    """Convert a gateway error envelope into a TransportError.

    ``code`` holds the gRPC status; older gateways sent the HTTP status as
    ``http_code`` or ``httpCode`` instead.
    """
    if isinstance(error.get("code"), int):
        status_code = http_status_from_code(error["code"])
    else:
        status_code = error.get("httpCode") or error.get("http_code") or HTTP_INTERNAL_ERROR
    return TransportError(
        error.get("message", "GetLog failed"),
        status_code=int(status_code),
        details=json.dumps(error["details"]) if error.get("details") else None,
    )


def _decode_log_body(body: bytes, content_type: str) -> bytes:
    """Unwrap the gateway's streamed HttpBody envelopes, if present.

    A server-streaming RPC comes back as newline-delimited
    ``{"result": {"data": "<base64>"}}`` objects; anything else is raw log
    text.
    """
    if "json" not in content_type:
        return body
    chunks: list[bytes] = []
    for line in body.splitlines():
        if not line.strip():
            continue
        try:
            envelope = json.loads(line)
        except json.JSONDecodeError:
            return body
        if not isinstance(envelope, dict):
            return body
        if "error" in envelope:
            raise _stream_error(envelope["error"] or {})
        result = envelope.get("result") or {}
        try:
            chunks.append(base64.b64decode(result.get("data") or "", validate=True))
        except binascii.Error as e:
            raise TransportError("GetLog returned an invalid chunk", details=str(e)) from e
    return b"".join(chunks)


def _verify(tls: TLSConfig) -> bool | ssl.SSLContext:
    """TLS verification setting for httpx.

    Raises:
        ResultsError: If the CA bundle or client key pair cannot be loaded
    """
    if tls.insecure:
        return False
    if not tls.ca_file and not tls.cert_file:
        return True
    try:
        context = ssl.create_default_context(cafile=tls.ca_file or None)
        if tls.cert_file and tls.key_file:
            context.load_cert_chain(tls.cert_file, tls.key_file)
    except (OSError, ssl.SSLError) as e:
        raise ResultsError("could not load TLS material", details=str(e)) from e
    return context


class RESTClient:
    """Results API client speaking HTTP/JSON.

    Example:
        with RESTClient(ClientConfig(host="https://tekton-results.example.com")) as c:
            page = c.list_records(ListRecordsRequest(parent="default/results/-"))
    """

    def __init__(self, config: ClientConfig, transport: httpx.BaseTransport | None = None) -> None:
        self.config = config
        self._api_path = "/" + config.api_path.strip("/")

        self._http = httpx.Client(
            base_url=config.host.rstrip("/"),
            headers=httpx.Headers(auth_headers(config.token, config.impersonation)),
            verify=_verify(config.tls),
            timeout=config.timeout or None,
            transport=transport,
        )

    # -------------------------------------------------------------------------
    # Plumbing
    # -------------------------------------------------------------------------

    def url(self, operation: str, request: Any) -> str:
        """Build the request path for ``operation``."""
        route = ROUTES[operation]
        path = f"{self._api_path}/parents/{getattr(request, route.routing)}"
        return f"{path}/{route.suffix}" if route.suffix else path

    def _send(self, operation: str, request: Any) -> httpx.Response:
        route = ROUTES[operation]
        url = self.url(operation, request)
        params = query_params(request, route.routing)
        logger.debug(f"REST {operation}: {route.method} {url} {params}")

        try:
            response = self._http.request(route.method, url, params=params)
        except httpx.TimeoutException as e:
            raise TransportError(
                f"{operation} timed out", status_code=HTTP_GATEWAY_TIMEOUT, details=str(e)
            ) from e
        except httpx.TransportError as e:
            raise TransportError(
                f"{operation} failed: could not reach {self.config.host}",
                status_code=HTTP_SERVICE_UNAVAILABLE,
                details=str(e),
            ) from e

        if not response.is_success:
            raise TransportError(
                f"{operation} failed: {response.reason_phrase or 'error'}",
                status_code=response.status_code,
                details=response.text or None,
            )
        return response

    def _json(self, operation: str, request: Any) -> dict[str, Any]:
        response = self._send(operation, request)
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                f"{operation} returned an invalid body", details=str(e)
            ) from e

    # -------------------------------------------------------------------------
    # Results
    # -------------------------------------------------------------------------

    def get_result(self, request: GetResultRequest) -> Result:
        return Result.from_json(self._json("GetResult", request))

    def list_results(self, request: ListResultsRequest) -> ListResultsResponse:
        return ListResultsResponse.from_json(self._json("ListResults", request))

    def delete_result(self, request: DeleteResultRequest) -> None:
        self._send("DeleteResult", request)

    def create_result(self, request: Any) -> Result:
        raise UnsupportedOperationError("CreateResult")

    def update_result(self, request: Any) -> Result:
        raise UnsupportedOperationError("UpdateResult")

    # -------------------------------------------------------------------------
    # Records
    # -------------------------------------------------------------------------

    def get_record(self, request: GetRecordRequest) -> Record:
        return Record.from_json(self._json("GetRecord", request))

    def list_records(self, request: ListRecordsRequest) -> ListRecordsResponse:
        return ListRecordsResponse.from_json(self._json("ListRecords", request))

    def delete_record(self, request: DeleteRecordRequest) -> None:
        self._send("DeleteRecord", request)

    def create_record(self, request: Any) -> Record:
        raise UnsupportedOperationError("CreateRecord")

    def update_record(self, request: Any) -> Record:
        raise UnsupportedOperationError("UpdateRecord")

    # -------------------------------------------------------------------------
    # Logs
    # -------------------------------------------------------------------------

    def get_log(self, request: GetLogRequest) -> Iterator[LogChunk]:
        response = self._send("GetLog", request)
        content_type = response.headers.get("content-type", "")
        data = _decode_log_body(response.content, content_type)
        return iter([LogChunk(data=data, content_type=content_type)])

    def list_logs(self, request: ListRecordsRequest) -> ListRecordsResponse:
        return ListRecordsResponse.from_json(self._json("ListLogs", request))

    def delete_log(self, request: DeleteLogRequest) -> None:
        self._send("DeleteLog", request)

    def update_log(self, request: Any) -> Any:
        raise UnsupportedOperationError("UpdateLog")

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
