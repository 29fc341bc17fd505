"""Selector encoding, paginated queries and cascade deletion."""

from .cascade import CascadeNode, cascade_delete, delete_matching
from .errors import (
    AmbiguousSelectorError,
    ConfigError,
    DecodeError,
    ResultsError,
    SelectorError,
    TransportError,
    UnsupportedOperationError,
    status,
)
from .logs import fetch_log, log_name
from .query import ObjectList, iter_pages, list_records, single_object
from .selector import OwnerReference, Selector, encode

__all__ = [
    "AmbiguousSelectorError",
    "CascadeNode",
    "ConfigError",
    "DecodeError",
    "ObjectList",
    "OwnerReference",
    "ResultsError",
    "Selector",
    "SelectorError",
    "TransportError",
    "UnsupportedOperationError",
    "cascade_delete",
    "delete_matching",
    "encode",
    "fetch_log",
    "iter_pages",
    "list_records",
    "log_name",
    "single_object",
    "status",
]
