"""gRPC error doubles."""

import grpc


class FakeRpcError(grpc.RpcError):
    """RpcError shaped like the one raised by a failed call."""

    def __init__(self, code, details=""):
        self._code = code
        self._details = details

    def code(self):
        return self._code

    def details(self):
        return self._details
