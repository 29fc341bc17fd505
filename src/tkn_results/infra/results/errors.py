"""Transport error types and HTTP-equivalent status extraction.

Both transport variants surface failures as ``TransportError`` so callers
can branch on a numeric status code regardless of the wire protocol.
"""

from __future__ import annotations

import grpc

# grpc-gateway's mapping from gRPC status codes to HTTP status codes
GRPC_TO_HTTP_STATUS: dict[grpc.StatusCode, int] = {
    grpc.StatusCode.OK: 200,
    grpc.StatusCode.CANCELLED: 499,
    grpc.StatusCode.UNKNOWN: 500,
    grpc.StatusCode.INVALID_ARGUMENT: 400,
    grpc.StatusCode.DEADLINE_EXCEEDED: 504,
    grpc.StatusCode.NOT_FOUND: 404,
    grpc.StatusCode.ALREADY_EXISTS: 409,
    grpc.StatusCode.PERMISSION_DENIED: 403,
    grpc.StatusCode.UNAUTHENTICATED: 401,
    grpc.StatusCode.RESOURCE_EXHAUSTED: 429,
    grpc.StatusCode.FAILED_PRECONDITION: 400,
    grpc.StatusCode.ABORTED: 409,
    grpc.StatusCode.OUT_OF_RANGE: 400,
    grpc.StatusCode.UNIMPLEMENTED: 501,
    grpc.StatusCode.INTERNAL: 500,
    grpc.StatusCode.UNAVAILABLE: 503,
    grpc.StatusCode.DATA_LOSS: 500,
}

HTTP_NOT_FOUND = 404
HTTP_INTERNAL_ERROR = 500


class ResultsError(Exception):
    """Base class for every error raised by tkn-results."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)


class TransportError(ResultsError):
    """Raised when a call to the Results API fails.

    Attributes:
        status_code: HTTP-equivalent status code of the failure
    """

    def __init__(
        self,
        message: str,
        status_code: int = HTTP_INTERNAL_ERROR,
        details: str | None = None,
    ):
        self.status_code = status_code
        super().__init__(message, details)

    def __str__(self) -> str:
        return f"{self.message} (status {self.status_code})"

    @property
    def not_found(self) -> bool:
        return self.status_code == HTTP_NOT_FOUND


class UnsupportedOperationError(TransportError):
    """Raised for create/update calls, which this client never performs."""

    def __init__(self, operation: str):
        super().__init__(f"{operation} is not implemented", status_code=501)
        self.operation = operation


def http_status_from_grpc(code: grpc.StatusCode | None) -> int:
    """Map a gRPC status code to its HTTP equivalent."""
    if code is None:
        return HTTP_INTERNAL_ERROR
    return GRPC_TO_HTTP_STATUS.get(code, HTTP_INTERNAL_ERROR)


def http_status_from_code(code: int) -> int:
    """Map a numeric gRPC status code, as carried in JSON error bodies."""
    for status_code in grpc.StatusCode:
        if status_code.value[0] == code:
            return http_status_from_grpc(status_code)
    return HTTP_INTERNAL_ERROR


def _rpc_code(error: grpc.RpcError) -> grpc.StatusCode | None:
    # Only errors raised by an actual call also implement grpc.Call
    code = getattr(error, "code", None)
    return code() if callable(code) else None


def from_rpc_error(error: grpc.RpcError, operation: str) -> TransportError:
    """Convert a ``grpc.RpcError`` raised by a call into a TransportError.

    Args:
        error: Error raised by the gRPC stub
        operation: RPC method name, used for context

    Returns:
        TransportError carrying the mapped HTTP status
    """
    code = _rpc_code(error)
    details = getattr(error, "details", None)
    detail = details() if callable(details) else None
    return TransportError(
        f"{operation} failed: {code.name if code else 'UNKNOWN'}",
        status_code=http_status_from_grpc(code),
        details=detail or None,
    )


def status(error: BaseException) -> int:
    """Extract the HTTP-equivalent status code from an error.

    Works for ``TransportError`` (literal stored code) and for raw
    ``grpc.RpcError`` values (mapped through the gRPC status table).
    Anything else maps to 500.

    Args:
        error: Any exception

    Returns:
        HTTP status code
    """
    if isinstance(error, TransportError):
        return error.status_code
    if isinstance(error, grpc.RpcError):
        return http_status_from_grpc(_rpc_code(error))
    return HTTP_INTERNAL_ERROR
