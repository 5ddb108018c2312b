"""web3.py AsyncWeb3 on top of the bundler routing provider."""

from unittest.mock import AsyncMock

import pytest
from web3 import AsyncWeb3

from eth_bundler.provider.async_web3 import DEFAULT_RPC_ERROR_CODE, AsyncWeb3BundlerProvider, create_bundler_web3
from eth_bundler.provider.errors import RPCError, RPCTransportError


@pytest.mark.asyncio
async def test_make_request_result():
    sender = AsyncMock()
    sender.send.return_value = "0x2105"
    provider = AsyncWeb3BundlerProvider(sender)

    response = await provider.make_request("eth_chainId", [])

    assert response["result"] == "0x2105"
    assert response["jsonrpc"] == "2.0"
    assert "id" in response
    sender.send.assert_awaited_once_with("eth_chainId", [])


@pytest.mark.asyncio
async def test_make_request_rpc_error():
    sender = AsyncMock()
    sender.send.side_effect = RPCError("execution reverted", code=3, data="0x08c379a0")
    provider = AsyncWeb3BundlerProvider(sender)

    response = await provider.make_request("eth_call", [{}, "latest"])

    assert "result" not in response
    assert response["error"] == {"code": 3, "message": "execution reverted", "data": "0x08c379a0"}


@pytest.mark.asyncio
async def test_make_request_rpc_error_without_code():
    sender = AsyncMock()
    sender.send.side_effect = RPCError("bad")
    provider = AsyncWeb3BundlerProvider(sender)

    response = await provider.make_request("eth_call", [])

    assert response["error"] == {"code": DEFAULT_RPC_ERROR_CODE, "message": "bad"}


@pytest.mark.asyncio
async def test_make_request_transport_error():
    """Transport errors are not turned into JSON-RPC errors"""
    sender = AsyncMock()
    sender.send.side_effect = RPCTransportError("Service Unavailable", method="eth_chainId", params=[], status_code=503)
    provider = AsyncWeb3BundlerProvider(sender)

    with pytest.raises(RPCTransportError):
        await provider.make_request("eth_chainId", [])


@pytest.mark.asyncio
async def test_is_connected():
    sender = AsyncMock()
    sender.send.return_value = "Geth/v1.14.0"
    assert await AsyncWeb3BundlerProvider(sender).is_connected()

    sender.send.side_effect = RPCTransportError("Connection refused", method="web3_clientVersion", params=[])
    assert not await AsyncWeb3BundlerProvider(sender).is_connected()


@pytest.mark.asyncio
async def test_async_web3(rpc_server, bundler_server):
    """AsyncWeb3 reads from the node, bundler methods go to the bundler"""
    rpc_server.reply({"jsonrpc": "2.0", "id": 1, "result": "0x2105"})
    bundler_server.reply({"jsonrpc": "2.0", "id": 1, "result": ["0x0000000071727De22E5E9d8BAf0edAc6f37da032"]})

    web3 = create_bundler_web3(rpc_server.url, user_agent="eth-bundler-tests/1.0", bundler_rpc=bundler_server.url)
    assert isinstance(web3, AsyncWeb3)

    assert await web3.eth.chain_id == 8453

    response = await web3.provider.make_request("eth_supportedEntryPoints", [])
    assert response["result"] == ["0x0000000071727De22E5E9d8BAf0edAc6f37da032"]

    assert rpc_server.methods == ["eth_chainId"]
    assert bundler_server.methods == ["eth_supportedEntryPoints"]
    assert rpc_server.requests[0].headers["User-Agent"] == "eth-bundler-tests/1.0"
