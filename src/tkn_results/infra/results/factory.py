"""Factory for Results API transports."""

from __future__ import annotations

from .client import ClientConfig, ClientType, ResultsClient


def new_client(config: ClientConfig) -> ResultsClient:
    """Construct the transport selected by ``config.client_type``.

    Args:
        config: Connection settings

    Returns:
        A ResultsClient (REST unless GRPC is requested)
    """
    if config.client_type == ClientType.GRPC:
        from .grpc_client import GRPCClient

        return GRPCClient(config)

    from .rest_client import RESTClient

    return RESTClient(config)
