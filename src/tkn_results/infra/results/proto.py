"""Protobuf messages for the ``tekton.results.v1alpha2`` gRPC API.

Only the messages and fields this client reads or sends are declared.
Field numbers match the upstream ``results.proto``/``resources.proto`` so
the encoding is wire compatible; fields the server sends that are not
declared here are kept as unknown fields and ignored.
"""

from __future__ import annotations

from typing import Any

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

PACKAGE = "tekton.results.v1alpha2"

RESULTS_SERVICE = f"{PACKAGE}.Results"
LOGS_SERVICE = f"{PACKAGE}.Logs"

_F = descriptor_pb2.FieldDescriptorProto

# (field name, number, type, label, message type name)
_FieldSpec = tuple[str, int, int, int, str | None]

_STRING = _F.TYPE_STRING
_BYTES = _F.TYPE_BYTES
_INT32 = _F.TYPE_INT32
_MESSAGE = _F.TYPE_MESSAGE
_ONE = _F.LABEL_OPTIONAL
_MANY = _F.LABEL_REPEATED

_LIST_REQUEST: list[_FieldSpec] = [
    ("parent", 1, _STRING, _ONE, None),
    ("filter", 2, _STRING, _ONE, None),
    ("page_size", 3, _INT32, _ONE, None),
    ("page_token", 4, _STRING, _ONE, None),
    ("order_by", 5, _STRING, _ONE, None),
]

_NAME_ONLY: list[_FieldSpec] = [("name", 1, _STRING, _ONE, None)]

MESSAGES: dict[str, list[_FieldSpec]] = {
    "Any": [
        ("type", 1, _STRING, _ONE, None),
        ("value", 2, _BYTES, _ONE, None),
    ],
    "Record": [
        ("name", 1, _STRING, _ONE, None),
        ("id", 2, _STRING, _ONE, None),
        ("data", 3, _MESSAGE, _ONE, "Any"),
        ("etag", 4, _STRING, _ONE, None),
    ],
    "Result": [
        ("name", 1, _STRING, _ONE, None),
        ("id", 2, _STRING, _ONE, None),
        ("annotations", 5, _MESSAGE, _MANY, "Result.AnnotationsEntry"),
        ("etag", 6, _STRING, _ONE, None),
    ],
    "GetResultRequest": _NAME_ONLY,
    "DeleteResultRequest": _NAME_ONLY,
    "ListResultsRequest": _LIST_REQUEST,
    "ListResultsResponse": [
        ("results", 1, _MESSAGE, _MANY, "Result"),
        ("next_page_token", 2, _STRING, _ONE, None),
    ],
    "GetRecordRequest": _NAME_ONLY,
    "DeleteRecordRequest": _NAME_ONLY,
    "ListRecordsRequest": _LIST_REQUEST,
    "ListRecordsResponse": [
        ("records", 1, _MESSAGE, _MANY, "Record"),
        ("next_page_token", 2, _STRING, _ONE, None),
    ],
    "GetLogRequest": _NAME_ONLY,
    "DeleteLogRequest": _NAME_ONLY,
    # google.api.HttpBody layout, streamed back by Logs.GetLog
    "HttpBody": [
        ("content_type", 1, _STRING, _ONE, None),
        ("data", 2, _BYTES, _ONE, None),
    ],
    "Empty": [],
}


def _add_fields(message: descriptor_pb2.DescriptorProto, specs: list[_FieldSpec]) -> None:
    for name, number, type_, label, type_name in specs:
        fd = message.field.add(name=name, number=number, type=type_, label=label)
        if type_name:
            fd.type_name = f".{PACKAGE}.{type_name}"


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="tkn_results/results_v1alpha2.proto",
        package=PACKAGE,
        syntax="proto3",
    )
    for name, specs in MESSAGES.items():
        message = file_proto.message_type.add(name=name)
        _add_fields(message, specs)
        if name == "Result":
            entry = message.nested_type.add(name="AnnotationsEntry")
            entry.options.map_entry = True
            _add_fields(
                entry,
                [
                    ("key", 1, _STRING, _ONE, None),
                    ("value", 2, _STRING, _ONE, None),
                ],
            )
    return file_proto


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_build_file().SerializeToString())


def message_class(name: str) -> Any:
    """Return the generated message class for ``name`` (e.g. "Record")."""
    return message_factory.GetMessageClass(_pool.FindMessageTypeByName(f"{PACKAGE}.{name}"))


Any_ = message_class("Any")
Record = message_class("Record")
Result = message_class("Result")
GetResultRequest = message_class("GetResultRequest")
DeleteResultRequest = message_class("DeleteResultRequest")
ListResultsRequest = message_class("ListResultsRequest")
ListResultsResponse = message_class("ListResultsResponse")
GetRecordRequest = message_class("GetRecordRequest")
DeleteRecordRequest = message_class("DeleteRecordRequest")
ListRecordsRequest = message_class("ListRecordsRequest")
ListRecordsResponse = message_class("ListRecordsResponse")
GetLogRequest = message_class("GetLogRequest")
DeleteLogRequest = message_class("DeleteLogRequest")
HttpBody = message_class("HttpBody")
Empty = message_class("Empty")
