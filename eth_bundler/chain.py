"""Chain names.

Used to map a chain id to the environment variables
holding the JSON-RPC and bundler endpoints for that chain.

- See :py:mod:`eth_bundler.provider.env`
"""

from typing import Optional

#: Manually maintained shorthand names for EVM chains that have ERC-4337 bundlers around
CHAIN_NAMES = {
    1: "Ethereum",
    10: "Optimism",
    56: "Binance",
    100: "Gnosis",
    137: "Polygon",
    8453: "Base",
    42161: "Arbitrum",
    43114: "Avalanche",
    59144: "Linea",
    81457: "Blast",
    #
    11155111: "Sepolia",
    84532: "Base_Sepolia",
    421614: "Arbitrum_Sepolia",
}


def get_chain_name(chain_id: int) -> str:
    """Translate Ethereum chain id to its name."""
    name = CHAIN_NAMES.get(chain_id)
    if name:
        return name

    return f"<Unknown chain, id {chain_id}>"


def get_chain_id_by_name(name: str) -> Optional[int]:
    """Get chain id by its name.

    :param name:
        Case-insensitive chain name, e.g. "Ethereum", "base_sepolia"

    :return:
        Chain id or None if not found
    """
    name_lower = name.lower()
    for chain_id, chain_name in CHAIN_NAMES.items():
        if chain_name.lower() == name_lower:
            return chain_id
    return None
