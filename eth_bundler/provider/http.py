"""Plain JSON-RPC over HTTP with custom request headers.

- Many commercial node and bundler services want to see an identification
  header like ``User-Agent`` on every request, or they refuse to serve us

- Unwraps the JSON-RPC response so the caller gets ``result`` only

- See :py:class:`HTTPJsonRpcProvider`
"""

import asyncio
import json
import logging
import time
from typing import Any

import aiohttp

from eth_bundler.provider.errors import RPCError, RPCTransportError, UnexpectedRPCError
from eth_bundler.utils import get_url_domain

logger = logging.getLogger(__name__)


def make_request_id() -> int:
    """JSON-RPC request id.

    Milliseconds since epoch. Uniqueness is not needed as every request
    is its own HTTP round trip.
    """
    return int(time.time() * 1000)


def build_request_data(method: str, params: list[Any]) -> dict:
    """Create a JSON-RPC 2.0 request envelope."""
    return {
        "method": method,
        "params": list(params),
        "id": make_request_id(),
        "jsonrpc": "2.0",
    }


class HTTPJsonRpcProvider:
    """Send JSON-RPC calls over HTTP POST using :py:mod:`aiohttp`.

    Example:

    .. code-block:: python

        provider = HTTPJsonRpcProvider(
            "https://eth.llamarpc.com",
            headers={"User-Agent": "my-app/1.0"},
        )
        block_number = await provider.send("eth_blockNumber", [])

    """

    def __init__(
        self,
        endpoint_uri: str,
        headers: dict[str, str] | None = None,
        session: aiohttp.ClientSession | None = None,
        timeout: float | None = None,
    ):
        """
        :param endpoint_uri:
            JSON-RPC endpoint URL.

        :param headers:
            Extra HTTP headers sent with every request, e.g. ``{"User-Agent": "..."}``.

        :param session:
            Share a :py:class:`aiohttp.ClientSession` for connection pooling.

            The caller owns and closes the session.
            If not given, every request opens and closes its own session.

        :param timeout:
            Total request timeout in seconds.

            If not given use :py:mod:`aiohttp` defaults.
        """
        assert type(endpoint_uri) == str, f"Got {type(endpoint_uri)}"
        self.endpoint_uri = endpoint_uri
        self.headers = dict(headers or {})
        self.session = session
        self.timeout = timeout

    def __repr__(self):
        return f"<HTTPJsonRpcProvider {get_url_domain(self.endpoint_uri)}>"

    def get_request_headers(self) -> dict[str, str]:
        """HTTP headers for every outgoing request."""
        return {
            "Content-Type": "application/json",
            **self.headers,
        }

    def get_request_kwargs(self) -> dict:
        """Extra arguments for :py:meth:`aiohttp.ClientSession.post`."""
        if self.timeout is None:
            return {}
        return {"timeout": aiohttp.ClientTimeout(total=self.timeout)}

    def with_endpoint(self, endpoint_uri: str) -> "HTTPJsonRpcProvider":
        """Create a provider for another URL with the same headers, session and timeout."""
        return HTTPJsonRpcProvider(
            endpoint_uri,
            headers=self.headers,
            session=self.session,
            timeout=self.timeout,
        )

    async def send(self, method: str, params: list[Any]) -> Any:
        """Perform a JSON-RPC call.

        :return:
            The ``result`` member of the response

        :raise RPCError:
            The server returned an ``error`` object

        :raise RPCTransportError:
            Connection failure, timeout or non-2xx HTTP status

        :raise UnexpectedRPCError:
            The request could not be serialised or the response was not JSON-RPC
        """
        try:
            request_data = build_request_data(method, params)
            body = json.dumps(request_data)
        except (TypeError, ValueError) as e:
            raise UnexpectedRPCError(f"Could not serialise params for {method}: {e}") from e

        logger.debug("Sending %s to %s, id %d", method, get_url_domain(self.endpoint_uri), request_data["id"])

        if self.session is not None:
            status, reason, content = await self._post(self.session, method, params, body)
        else:
            async with aiohttp.ClientSession() as session:
                status, reason, content = await self._post(session, method, params, body)

        return self._process_response(method, params, status, reason, content)

    async def _post(
        self,
        session: aiohttp.ClientSession,
        method: str,
        params: list[Any],
        body: str,
    ) -> tuple[int, str, bytes]:
        try:
            async with session.post(
                self.endpoint_uri,
                data=body,
                headers=self.get_request_headers(),
                **self.get_request_kwargs(),
            ) as response:
                content = await response.read()
                return response.status, response.reason or "", content
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.debug("JSON-RPC %s to %s failed: %s", method, get_url_domain(self.endpoint_uri), e)
            raise RPCTransportError(str(e) or type(e).__name__, method=method, params=params) from e

    def _process_response(self, method: str, params: list[Any], status: int, reason: str, content: bytes) -> Any:
        # Not valid UTF-8 fails here too, UnicodeDecodeError is a ValueError
        try:
            response_data = json.loads(content)
        except ValueError:
            response_data = None

        text = content.decode("utf-8", errors="replace")

        if not 200 <= status < 300:
            message = reason
            if isinstance(response_data, dict) and isinstance(response_data.get("error"), dict):
                message = response_data["error"].get("message") or reason
            logger.debug("JSON-RPC %s got HTTP %d: %s", method, status, message)
            raise RPCTransportError(
                message,
                method=method,
                params=params,
                status_code=status,
                response_data=response_data if response_data is not None else text,
            )

        if not isinstance(response_data, dict):
            raise UnexpectedRPCError(f"{method} response is not a JSON-RPC object: {text[:200]!r}")

        error = response_data.get("error")
        if error is not None:
            logger.debug("JSON-RPC %s returned error %s", method, error)
            raise RPCError.from_error_payload(error)

        if "result" not in response_data:
            raise UnexpectedRPCError(f"{method} response has neither result nor error: {text[:200]!r}")

        return response_data["result"]
