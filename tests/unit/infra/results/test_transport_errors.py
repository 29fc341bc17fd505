"""Unit tests for transport error mapping."""

import grpc
import pytest

from tkn_results.infra.results import TransportError, UnsupportedOperationError, status
from tkn_results.infra.results.errors import (
    from_rpc_error,
    http_status_from_code,
    http_status_from_grpc,
)
from tests.fixtures import FakeRpcError


class TestStatus:
    def test_transport_error_keeps_its_code(self):
        assert status(TransportError("boom", status_code=404)) == 404

    @pytest.mark.parametrize(
        ("code", "expected"),
        [
            (grpc.StatusCode.NOT_FOUND, 404),
            (grpc.StatusCode.PERMISSION_DENIED, 403),
            (grpc.StatusCode.UNAUTHENTICATED, 401),
            (grpc.StatusCode.UNAVAILABLE, 503),
            (grpc.StatusCode.DEADLINE_EXCEEDED, 504),
            (grpc.StatusCode.INVALID_ARGUMENT, 400),
        ],
    )
    def test_rpc_errors_are_mapped(self, code, expected):
        assert status(FakeRpcError(code)) == expected

    def test_rpc_error_without_code_is_internal(self):
        assert status(grpc.RpcError()) == 500

    def test_anything_else_is_internal(self):
        assert status(ValueError("nope")) == 500

    def test_missing_code_maps_to_internal(self):
        assert http_status_from_grpc(None) == 500

    @pytest.mark.parametrize(
        ("code", "expected"), [(5, 404), (7, 403), (16, 401), (0, 200), (99, 500)]
    )
    def test_numeric_codes_are_mapped(self, code, expected):
        assert http_status_from_code(code) == expected


class TestFromRpcError:
    def test_carries_code_and_details(self):
        error = from_rpc_error(FakeRpcError(grpc.StatusCode.NOT_FOUND, "record not found"), "GetRecord")

        assert error.status_code == 404
        assert error.not_found
        assert error.message == "GetRecord failed: NOT_FOUND"
        assert error.details == "record not found"

    def test_empty_details_become_none(self):
        error = from_rpc_error(FakeRpcError(grpc.StatusCode.INTERNAL), "ListRecords")

        assert error.details is None
        assert error.status_code == 500


def test_str_includes_status():
    assert str(TransportError("DeleteRecord failed", status_code=403)) == (
        "DeleteRecord failed (status 403)"
    )


def test_unsupported_operation_is_not_implemented():
    error = UnsupportedOperationError("CreateRecord")

    assert isinstance(error, TransportError)
    assert error.status_code == 501
    assert error.operation == "CreateRecord"
    assert not error.not_found
