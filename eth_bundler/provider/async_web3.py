"""Use a bundler routing provider with :py:class:`web3.AsyncWeb3`.

- :py:class:`AsyncWeb3BundlerProvider` wraps any
  :py:class:`~eth_bundler.provider.named.JsonRpcSender` as a web3.py async provider

- web3.py wants full JSON-RPC response dicts, so results and RPC errors
  are put back into an envelope

Example:

.. code-block:: python

    web3 = create_bundler_web3(
        os.environ["JSON_RPC_BASE"],
        user_agent="my-app/1.0",
        bundler_rpc=os.environ["BUNDLER_RPC_BASE"],
    )
    chain_id = await web3.eth.chain_id
    entry_points = await web3.provider.make_request("eth_supportedEntryPoints", [])

"""

import logging
from typing import Any

from web3 import AsyncWeb3
from web3.providers.async_base import AsyncJSONBaseProvider
from web3.types import RPCEndpoint, RPCResponse

from eth_bundler.provider.bundler import create_bundler_provider
from eth_bundler.provider.errors import RPCError, RPCTransportError
from eth_bundler.provider.http import make_request_id
from eth_bundler.provider.named import JsonRpcSender, get_provider_name

logger = logging.getLogger(__name__)

#: Error code used when the server did not give one.
#:
#: JSON-RPC 2.0 "Server error" range.
DEFAULT_RPC_ERROR_CODE = -32000


class AsyncWeb3BundlerProvider(AsyncJSONBaseProvider):
    """web3.py async provider on top of a JSON-RPC sender.

    .. note::

        Transport errors are raised as is, web3.py middlewares
        do not see them as JSON-RPC errors.
    """

    def __init__(self, sender: JsonRpcSender):
        super().__init__()
        self.sender = sender

    def __repr__(self):
        return f"<AsyncWeb3BundlerProvider {get_provider_name(self.sender)}>"

    @property
    def endpoint_uri(self) -> str:
        return self.sender.endpoint_uri

    async def make_request(self, method: RPCEndpoint, params: Any) -> RPCResponse:
        request_id = make_request_id()
        try:
            result = await self.sender.send(method, list(params or []))
        except RPCError as e:
            error = {
                "code": e.code if isinstance(e.code, int) else DEFAULT_RPC_ERROR_CODE,
                "message": e.message,
            }
            if e.data is not None:
                error["data"] = e.data
            return {"jsonrpc": "2.0", "id": request_id, "error": error}

        return {"jsonrpc": "2.0", "id": request_id, "result": result}

    async def is_connected(self, show_traceback: bool = False) -> bool:
        try:
            await self.sender.send("web3_clientVersion", [])
        except (RPCError, RPCTransportError) as e:
            if show_traceback:
                raise
            logger.info("Provider %s not connected: %s", get_provider_name(self.sender), e)
            return False
        return True


def create_bundler_web3(
    rpc_url: str,
    user_agent: str,
    bundler_rpc: str | None = None,
    **kwargs,
) -> AsyncWeb3:
    """Create an :py:class:`AsyncWeb3` instance using a bundler routing provider.

    :param kwargs:
        Passed to :py:func:`eth_bundler.provider.bundler.create_bundler_provider`
    """
    sender = create_bundler_provider(rpc_url, user_agent, bundler_rpc=bundler_rpc, **kwargs)
    return AsyncWeb3(AsyncWeb3BundlerProvider(sender))
