"""Check JSON-RPC node and ERC-4337 bundler connection.

.. code-block:: shell

    export JSON_RPC_BASE=...
    export BUNDLER_RPC_BASE=...
    export JSON_RPC_USER_AGENT="my-app/1.0"
    CHAIN_ID=8453 python scripts/check-bundler.py
"""
import asyncio
import os

from eth_bundler.chain import get_chain_name
from eth_bundler.provider.env import create_bundler_provider_from_env
from eth_bundler.provider.named import get_provider_name
from eth_bundler.utils import setup_console_logging


async def main():
    setup_console_logging(default_log_level="info")
    chain_id = int(os.environ.get("CHAIN_ID", "1"))
    provider = create_bundler_provider_from_env(chain_id)
    print(f"Using {get_provider_name(provider)} for {get_chain_name(chain_id)}")

    reported_chain_id = int(await provider.send("eth_chainId", []), 16)
    block_number = int(await provider.send("eth_blockNumber", []), 16)
    print(f"Connected to chain {reported_chain_id}, last block is: {block_number:,}")

    if provider.has_bundler():
        entry_points = await provider.send("eth_supportedEntryPoints", [])
        print(f"Bundler supports entry points: {', '.join(entry_points)}")
    else:
        print("No bundler configured")


asyncio.run(main())
