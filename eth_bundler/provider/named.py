"""Sender interface and helpers to extract the URL endpoint and name of a provider.

See also

- :py:mod:`eth_bundler.provider.http`

- :py:mod:`eth_bundler.provider.bundler`

"""

from typing import Any, Protocol, runtime_checkable

from eth_bundler.utils import get_url_domain


@runtime_checkable
class JsonRpcSender(Protocol):
    """Anything that can send a JSON-RPC call and return its result.

    - ``send()`` returns the unwrapped ``result`` of the call

    - Failures are raised, see :py:mod:`eth_bundler.provider.errors`
    """

    async def send(self, method: str, params: list[Any]) -> Any:
        """Perform one JSON-RPC call."""


def get_provider_name(provider: Any) -> str:
    """Get loggable name of the JSON-RPC provider.

    Strips out API keys from the URL of a JSON-RPC API provider.

    Example:

    .. code-block:: python

        print(get_provider_name(provider))

    :return:
        HTTP provider URL's domain name if available.

        Assume any API keys are not part of the domain name.
    """

    from eth_bundler.provider.bundler import BundlerJsonRpcProvider

    if isinstance(provider, BundlerJsonRpcProvider):
        if provider.bundler_provider is not None:
            return f"{get_provider_name(provider.call_provider)}, bundler {get_provider_name(provider.bundler_provider)}"
        return get_provider_name(provider.call_provider)
    elif isinstance(getattr(provider, "endpoint_uri", None), str):
        return get_url_domain(provider.endpoint_uri)
    return str(provider)
