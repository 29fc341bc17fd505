"""Shared pytest fixtures."""

from .kubeconfig import kubeconfig_data, kubeconfig_file
from .results import FakeResultsClient, fake_client, make_run
from .rpc import FakeRpcError

__all__ = [
    "FakeResultsClient",
    "FakeRpcError",
    "fake_client",
    "kubeconfig_data",
    "kubeconfig_file",
    "make_run",
]
