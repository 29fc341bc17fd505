"""Kubernetes cluster lookups.

Example:
    from tkn_results.infra.k8s import discover_endpoints_sync

    for endpoint in discover_endpoints_sync():
        print(endpoint.host)
"""

from .discovery import Endpoint, discover_endpoints, discover_endpoints_sync
from .utils import run_sync

__all__ = [
    "Endpoint",
    "discover_endpoints",
    "discover_endpoints_sync",
    "run_sync",
]
