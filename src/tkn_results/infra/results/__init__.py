"""Results API transports."""

from .client import (
    ClientConfig,
    ClientType,
    DeleteLogRequest,
    DeleteRecordRequest,
    DeleteResultRequest,
    GetLogRequest,
    GetRecordRequest,
    GetResultRequest,
    ImpersonationConfig,
    ListRecordsRequest,
    ListRecordsResponse,
    ListResultsRequest,
    ListResultsResponse,
    LogChunk,
    Record,
    RecordData,
    Result,
    ResultsClient,
    TLSConfig,
)
from .errors import ResultsError, TransportError, UnsupportedOperationError, status
from .factory import new_client

__all__ = [
    "ClientConfig",
    "ClientType",
    "DeleteLogRequest",
    "DeleteRecordRequest",
    "DeleteResultRequest",
    "GetLogRequest",
    "GetRecordRequest",
    "GetResultRequest",
    "ImpersonationConfig",
    "ListRecordsRequest",
    "ListRecordsResponse",
    "ListResultsRequest",
    "ListResultsResponse",
    "LogChunk",
    "Record",
    "RecordData",
    "Result",
    "ResultsClient",
    "ResultsError",
    "TLSConfig",
    "TransportError",
    "UnsupportedOperationError",
    "new_client",
    "status",
]
