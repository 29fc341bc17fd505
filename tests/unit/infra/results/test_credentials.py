"""Unit tests for per-call credentials."""

from collections import namedtuple

from tkn_results.infra.results import ImpersonationConfig
from tkn_results.infra.results.credentials import AuthInterceptor, auth_headers, grpc_metadata

Details = namedtuple(
    "Details", ("method", "timeout", "metadata", "credentials", "wait_for_ready", "compression")
)


def test_empty_credentials_add_nothing():
    assert auth_headers("", ImpersonationConfig()) == []


def test_headers_in_stable_order():
    impersonation = ImpersonationConfig(
        user="alice", uid="1", groups=["a", "b"], extra={"reason": ["ci", "debug"]}
    )

    assert auth_headers("tok", impersonation) == [
        ("Authorization", "Bearer tok"),
        ("Impersonate-User", "alice"),
        ("Impersonate-Uid", "1"),
        ("Impersonate-Group", "a"),
        ("Impersonate-Group", "b"),
        ("Impersonate-Extra-reason", "ci"),
        ("Impersonate-Extra-reason", "debug"),
    ]


def test_malformed_percent_encoding_is_kept():
    headers = auth_headers("", ImpersonationConfig(extra={"bad%zz": ["x"]}))

    assert headers == [("Impersonate-Extra-bad%zz", "x")]


def test_grpc_metadata_keys_are_lower_case():
    metadata = grpc_metadata("tok", ImpersonationConfig(user="alice"))

    assert metadata == [("authorization", "Bearer tok"), ("impersonate-user", "alice")]


def test_interceptor_appends_metadata_to_every_call():
    interceptor = AuthInterceptor([("authorization", "Bearer tok")])
    seen = []

    def continuation(details, request):
        seen.append((details, request))
        return "reply"

    original = Details("/svc/Method", 5, [("x-trace", "1")], None, None, None)

    assert interceptor.intercept_unary_unary(continuation, original, "req") == "reply"
    assert interceptor.intercept_unary_stream(continuation, original, "req") == "reply"

    for details, request in seen:
        assert request == "req"
        assert details.method == "/svc/Method"
        assert details.timeout == 5
        assert details.metadata == [("x-trace", "1"), ("authorization", "Bearer tok")]
    assert original.metadata == [("x-trace", "1")]
