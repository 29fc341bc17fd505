"""Per-call credentials for the Results API transports.

A bearer token and optional impersonation identity are attached to every
call: as HTTP headers for the REST bridge, as call metadata for gRPC.
"""

from __future__ import annotations

from collections import namedtuple
from collections.abc import Callable, Iterator
from typing import Any
from urllib.parse import unquote

import grpc

from .client import ImpersonationConfig

IMPERSONATE_USER_HEADER = "Impersonate-User"
IMPERSONATE_UID_HEADER = "Impersonate-Uid"
IMPERSONATE_GROUP_HEADER = "Impersonate-Group"
IMPERSONATE_EXTRA_HEADER_PREFIX = "Impersonate-Extra-"


def auth_headers(token: str, impersonation: ImpersonationConfig) -> list[tuple[str, str]]:
    """Build the authentication header pairs for one call.

    Repeated keys are allowed (one ``Impersonate-Group`` per group).

    Args:
        token: Bearer token, may be empty
        impersonation: Identity to act as

    Returns:
        List of (header, value) pairs
    """
    headers: list[tuple[str, str]] = []
    if token:
        headers.append(("Authorization", f"Bearer {token}"))
    if impersonation.user:
        headers.append((IMPERSONATE_USER_HEADER, impersonation.user))
    if impersonation.uid:
        headers.append((IMPERSONATE_UID_HEADER, impersonation.uid))
    for group in impersonation.groups:
        headers.append((IMPERSONATE_GROUP_HEADER, group))
    for key, values in impersonation.extra.items():
        # Keys may arrive %-encoded; malformed sequences are kept verbatim
        for value in values:
            headers.append((IMPERSONATE_EXTRA_HEADER_PREFIX + unquote(key), value))
    return headers


def grpc_metadata(token: str, impersonation: ImpersonationConfig) -> list[tuple[str, str]]:
    """Same as :func:`auth_headers` with lower-cased keys, as gRPC requires."""
    return [(key.lower(), value) for key, value in auth_headers(token, impersonation)]


class _CallDetails(
    namedtuple(
        "_CallDetails",
        ("method", "timeout", "metadata", "credentials", "wait_for_ready", "compression"),
    ),
    grpc.ClientCallDetails,
):
    pass


class AuthInterceptor(grpc.UnaryUnaryClientInterceptor, grpc.UnaryStreamClientInterceptor):
    """Attach authentication metadata to every unary and server-streaming call.

    Works on insecure channels too, where ``grpc.CallCredentials`` are
    rejected by the runtime.
    """

    def __init__(self, metadata: list[tuple[str, str]]):
        self._metadata = metadata

    def _decorate(self, details: grpc.ClientCallDetails) -> grpc.ClientCallDetails:
        metadata = list(details.metadata or [])
        metadata.extend(self._metadata)
        return _CallDetails(
            details.method,
            details.timeout,
            metadata,
            details.credentials,
            getattr(details, "wait_for_ready", None),
            getattr(details, "compression", None),
        )

    def intercept_unary_unary(
        self,
        continuation: Callable[[grpc.ClientCallDetails, Any], Any],
        client_call_details: grpc.ClientCallDetails,
        request: Any,
    ) -> Any:
        return continuation(self._decorate(client_call_details), request)

    def intercept_unary_stream(
        self,
        continuation: Callable[[grpc.ClientCallDetails, Any], Iterator[Any]],
        client_call_details: grpc.ClientCallDetails,
        request: Any,
    ) -> Iterator[Any]:
        return continuation(self._decorate(client_call_details), request)
