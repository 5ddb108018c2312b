"""ERC-4337 bundler routing JSON-RPC provider.

Account abstraction `UserOperations <https://eips.ethereum.org/EIPS/eip-4337>`__
are not served by normal Ethereum nodes. They go to a separate
JSON-RPC service called a bundler.

This module provides a provider that

- Uses the bundler endpoint for ERC-4337 methods

- Uses normal JSON-RPC node for everything else

Example:

.. code-block:: python

    provider = create_bundler_provider(
        os.environ["JSON_RPC_BASE"],
        user_agent="my-app/1.0",
        bundler_rpc=os.environ.get("BUNDLER_RPC_BASE"),
    )
    entry_points = await provider.send("eth_supportedEntryPoints", [])
    block_number = await provider.send("eth_blockNumber", [])

"""

import logging
from typing import Any, Iterable

import aiohttp

from eth_bundler.provider.http import HTTPJsonRpcProvider
from eth_bundler.provider.named import JsonRpcSender, get_provider_name

logger = logging.getLogger(__name__)


#: RPC methods served by an ERC-4337 bundler
#:
BUNDLER_METHODS = frozenset(
    {
        "eth_sendUserOperation",
        "eth_estimateUserOperationGas",
        "eth_getUserOperationByHash",
        "eth_getUserOperationReceipt",
        "eth_supportedEntryPoints",
    }
)


class BundlerJsonRpcProvider:
    """Routes ERC-4337 methods through a bundler endpoint.

    - If a bundler is configured, methods in ``bundler_methods`` go to it
      as is and its result is returned unchanged

    - Everything else goes to the call provider

    - No fallback: if the chosen provider fails, the call fails
    """

    def __init__(
        self,
        call_provider: JsonRpcSender,
        bundler_provider: JsonRpcSender | None = None,
        bundler_methods: Iterable[str] = BUNDLER_METHODS,
    ):
        """
        :param call_provider:
            Normal JSON-RPC node.

        :param bundler_provider:
            ERC-4337 bundler. Can be set later with :py:meth:`set_bundler_rpc`.

        :param bundler_methods:
            Exact method names routed to the bundler.
        """
        self.call_provider = call_provider
        self.bundler_provider = bundler_provider
        self.bundler_methods = frozenset(bundler_methods)

    def __repr__(self):
        return f"<BundlerJsonRpcProvider {get_provider_name(self)}>"

    @property
    def endpoint_uri(self) -> str:
        """Call provider endpoint.

        .. warning::

            Endpoint URIs often contain API keys.
            They should be never publicly displayed as is.
        """
        return self.call_provider.endpoint_uri

    @property
    def bundler_endpoint_uri(self) -> str | None:
        """Bundler endpoint, if any."""
        if self.bundler_provider is None:
            return None
        return getattr(self.bundler_provider, "endpoint_uri", None)

    def has_bundler(self) -> bool:
        return self.bundler_provider is not None

    def is_bundler_method(self, method: str) -> bool:
        """Does this RPC method go to the bundler"""
        return method in self.bundler_methods

    def set_bundler_rpc(self, bundler_rpc: str | None = None) -> "BundlerJsonRpcProvider":
        """Set the bundler JSON-RPC URL.

        The bundler gets the same HTTP headers, session and timeout as the call provider.

        :param bundler_rpc:
            Bundler URL. If empty or ``None``, do nothing.

        :return:
            Self, for chaining
        """
        if not bundler_rpc:
            return self

        assert isinstance(self.call_provider, HTTPJsonRpcProvider), f"set_bundler_rpc() needs HTTPJsonRpcProvider as the call provider, got {self.call_provider}"
        self.bundler_provider = self.call_provider.with_endpoint(bundler_rpc)
        logger.info("Bundler methods routed to %s", get_provider_name(self.bundler_provider))
        return self

    def set_bundler_provider(self, provider: JsonRpcSender | None) -> "BundlerJsonRpcProvider":
        """Use any JSON-RPC sender as the bundler.

        :return:
            Self, for chaining
        """
        self.bundler_provider = provider
        return self

    async def send(self, method: str, params: list[Any]) -> Any:
        """Perform a JSON-RPC call on the bundler or the call provider.

        See :py:meth:`eth_bundler.provider.http.HTTPJsonRpcProvider.send` for raised errors.
        """
        if self.bundler_provider is not None and self.is_bundler_method(method):
            logger.debug("Routing %s to bundler", method)
            return await self.bundler_provider.send(method, params)
        return await self.call_provider.send(method, params)


def create_bundler_provider(
    rpc_url: str,
    user_agent: str,
    bundler_rpc: str | None = None,
    user_agent_header: str = "User-Agent",
    session: aiohttp.ClientSession | None = None,
    timeout: float | None = None,
    bundler_methods: Iterable[str] = BUNDLER_METHODS,
) -> BundlerJsonRpcProvider:
    """Create a bundler routing provider over HTTP.

    :param rpc_url:
        Normal JSON-RPC node URL.

    :param user_agent:
        Identification header value sent with every request.

    :param bundler_rpc:
        ERC-4337 bundler URL. If not given, all calls go to ``rpc_url``.

    :param user_agent_header:
        Name of the identification header.

    :param session:
        Shared :py:class:`aiohttp.ClientSession`, owned by the caller.

    :param timeout:
        Total HTTP request timeout in seconds.

    :param bundler_methods:
        Override the methods routed to the bundler.
    """
    assert rpc_url, "create_bundler_provider(): JSON-RPC URL missing"
    call_provider = HTTPJsonRpcProvider(
        rpc_url,
        headers={user_agent_header: user_agent},
        session=session,
        timeout=timeout,
    )
    logger.info(
        "Created provider %s, identification header %s",
        get_provider_name(call_provider),
        user_agent_header,
    )
    provider = BundlerJsonRpcProvider(call_provider, bundler_methods=bundler_methods)
    return provider.set_bundler_rpc(bundler_rpc)
