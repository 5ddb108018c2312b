"""Local JSON-RPC test servers.

Run a real :py:mod:`aiohttp` web server on localhost that records what it receives
and answers with a canned response.
"""

import asyncio
import json
from dataclasses import dataclass
from typing import Any

import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer


@dataclass
class RecordedRequest:
    """One HTTP request the server got."""

    path: str

    #: Case-insensitive header lookup
    headers: Any

    #: Decoded JSON-RPC request body
    data: Any


class MockRPCServer:
    """JSON-RPC server that always gives the same answer."""

    def __init__(self):
        self.requests: list[RecordedRequest] = []
        self.status = 200
        self.response: Any = {"jsonrpc": "2.0", "id": 1, "result": None}
        self.delay = 0.0
        self.server: TestServer | None = None

    def reply(self, response: Any, status: int = 200):
        """Set the canned response.

        :param response:
            JSON payload, a string sent as text or bytes sent as ``application/json``
        """
        self.response = response
        self.status = status

    @property
    def url(self) -> str:
        return str(self.server.make_url("/"))

    @property
    def methods(self) -> list[str]:
        return [r.data["method"] for r in self.requests]

    async def handle(self, request: web.Request) -> web.Response:
        text = await request.text()
        self.requests.append(RecordedRequest(path=request.path, headers=request.headers.copy(), data=json.loads(text)))
        if self.delay:
            await asyncio.sleep(self.delay)
        if isinstance(self.response, bytes):
            return web.Response(status=self.status, body=self.response, content_type="application/json")
        if isinstance(self.response, str):
            return web.Response(status=self.status, text=self.response, content_type="text/plain")
        return web.json_response(self.response, status=self.status)

    async def start(self):
        app = web.Application()
        app.router.add_post("/{path:.*}", self.handle)
        self.server = TestServer(app)
        await self.server.start_server()

    async def close(self):
        await self.server.close()


@pytest_asyncio.fixture()
async def rpc_server() -> MockRPCServer:
    """Normal JSON-RPC node."""
    server = MockRPCServer()
    await server.start()
    try:
        yield server
    finally:
        await server.close()


@pytest_asyncio.fixture()
async def bundler_server() -> MockRPCServer:
    """ERC-4337 bundler."""
    server = MockRPCServer()
    await server.start()
    try:
        yield server
    finally:
        await server.close()
