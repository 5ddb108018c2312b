"""Get JSON-RPC and bundler URLs from environment variables.

- ``JSON_RPC_{CHAIN}``: normal node, e.g. ``JSON_RPC_BASE``

- ``BUNDLER_RPC_{CHAIN}``: ERC-4337 bundler, e.g. ``BUNDLER_RPC_BASE``

- ``JSON_RPC_USER_AGENT``: identification header value
"""

import os

from eth_bundler.chain import CHAIN_NAMES
from eth_bundler.provider.bundler import BundlerJsonRpcProvider, create_bundler_provider

#: Environment variable for the identification header value
USER_AGENT_ENV = "JSON_RPC_USER_AGENT"

#: Used if no user agent is configured
DEFAULT_USER_AGENT = "eth-bundler"


def _get_chain_env_name(chain: int) -> str:
    assert type(chain) is int, f"Chain ID must be an integer: {type(chain)}"
    chain_name = CHAIN_NAMES.get(chain)
    assert chain_name, f"CHAIN_NAMES not configured for chain id {chain}"
    return chain_name.upper()


def get_json_rpc_env(chain: int) -> str:
    """Get the JSON-RPC URL environment variable based on the chain id.

    - Map chain id to a name and from there to environment variables.
    """
    return f"JSON_RPC_{_get_chain_env_name(chain)}"


def get_bundler_rpc_env(chain: int) -> str:
    """Get the bundler URL environment variable based on the chain id."""
    return f"BUNDLER_RPC_{_get_chain_env_name(chain)}"


def read_json_rpc_url(chain: int) -> str:
    """Read JSON-RPC URL from environment variable based on the chain id.

    :raises ValueError: If the environment variable is not set for the given chain.
    """
    env_var = get_json_rpc_env(chain)
    json_rpc_url = os.environ.get(env_var)
    if not json_rpc_url:
        raise ValueError(f"Environment variable {env_var} is not set for chain {chain}")
    return json_rpc_url


def read_bundler_rpc_url(chain: int) -> str | None:
    """Read bundler URL from environment variable based on the chain id.

    :return:
        ``None`` if not configured
    """
    return os.environ.get(get_bundler_rpc_env(chain)) or None


def read_user_agent(default: str = DEFAULT_USER_AGENT) -> str:
    return os.environ.get(USER_AGENT_ENV) or default


def create_bundler_provider_from_env(chain: int, **kwargs) -> BundlerJsonRpcProvider:
    """Create a bundler routing provider configured by environment variables.

    :param kwargs:
        Passed to :py:func:`eth_bundler.provider.bundler.create_bundler_provider`
    """
    return create_bundler_provider(
        read_json_rpc_url(chain),
        user_agent=read_user_agent(),
        bundler_rpc=read_bundler_rpc_url(chain),
        **kwargs,
    )
