"""Exceptions raised by JSON-RPC providers.

Every failed :py:meth:`~eth_bundler.provider.named.JsonRpcSender.send` call
ends up as exactly one of these:

- :py:class:`RPCError` when the node or bundler answered with a JSON-RPC ``error`` object

- :py:class:`RPCTransportError` when the HTTP request itself failed or got a non-2xx status

- :py:class:`UnexpectedRPCError` for anything else, like a response that is not JSON-RPC at all

Nothing is retried.
"""

import json
from typing import Any


class BundlerProviderError(Exception):
    """Base class for all errors raised by :py:mod:`eth_bundler` providers."""


class RPCError(BundlerProviderError, ValueError):
    """JSON-RPC server returned an ``error`` object.

    Inherits from :py:class:`ValueError` as web3.py traditionally
    raises JSON-RPC errors as ``ValueError``.
    """

    def __init__(self, message: str, code: int | None = None, data: Any = None):
        self.message = message
        self.code = code
        self.data = data
        super().__init__(f"RPC Error: {message} (Code: {code})")

    @classmethod
    def from_error_payload(cls, error: dict | Any) -> "RPCError":
        """Create from the ``error`` member of a JSON-RPC response.

        Some nodes return a bare string instead of an object.
        """
        if isinstance(error, dict):
            return cls(
                str(error.get("message", "")),
                code=error.get("code"),
                data=error.get("data"),
            )
        return cls(str(error))


class RPCTransportError(BundlerProviderError):
    """HTTP request failed.

    Carries as much of the failed request as we know,
    to make it possible to diagnose the issue from the logs.
    """

    def __init__(
        self,
        message: str,
        method: str,
        params: Any,
        status_code: int | None = None,
        response_data: Any = None,
    ):
        self.message = message
        self.method = method
        self.params = params
        self.status_code = status_code
        self.response_data = response_data
        status = status_code if status_code is not None else "Unknown Status Code"
        super().__init__(
            f"HTTP {status} - RPC request failed: {message}\n"
            f"Request Method: {method}\n"
            f"Request Params: {_dump(params)}\n"
            f"Response Data: {_dump(response_data if response_data is not None else {})}"
        )


class UnexpectedRPCError(BundlerProviderError):
    """Something else went wrong, e.g. the server did not speak JSON-RPC."""

    def __init__(self, message: str):
        super().__init__(f"Unexpected error during RPC request: {message}")


def _dump(value: Any) -> str:
    # Only used for error messages, so never fail on odd payloads
    return json.dumps(value, default=str)
