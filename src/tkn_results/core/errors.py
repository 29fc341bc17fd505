"""Error hierarchy for tkn-results.

Every error derives from ``ResultsError`` so the CLI can report any of them
the same way. Transport errors carry an HTTP-equivalent status code.
"""

from __future__ import annotations

from tkn_results.infra.results.errors import (
    ResultsError,
    TransportError,
    UnsupportedOperationError,
    status,
)


class SelectorError(ResultsError):
    """Raised when a selector is malformed. Never reaches the network."""


class AmbiguousSelectorError(SelectorError):
    """Raised when more than one object matches where exactly one was required."""


class DecodeError(ResultsError):
    """Raised when a record's payload is not a JSON object."""


class ConfigError(ResultsError):
    """Raised when the kubeconfig, its results extension or the host is unusable."""


__all__ = [
    "AmbiguousSelectorError",
    "ConfigError",
    "DecodeError",
    "ResultsError",
    "SelectorError",
    "TransportError",
    "UnsupportedOperationError",
    "status",
]
