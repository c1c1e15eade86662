"""Pytest configuration for the OpenAlgo client."""

import asyncio
import json
from typing import List, Optional
from unittest.mock import Mock

import pytest
import requests

from openalgo.streaming import OpenAlgoWebSocket

_CLOSE = object()


class FakeWebSocket:
    """In-memory stand-in for a websockets client connection"""

    def __init__(self):
        self.sent: List[dict] = []
        self.closed = False
        self._incoming: asyncio.Queue = asyncio.Queue()

    async def send(self, message: str) -> None:
        if self.closed:
            raise ConnectionResetError("socket closed")
        self.sent.append(json.loads(message))

    async def close(self) -> None:
        self.closed = True
        self._incoming.put_nowait(_CLOSE)

    def feed(self, message) -> None:
        """Deliver a server frame (dicts are JSON encoded)"""
        if isinstance(message, dict):
            message = json.dumps(message)
        self._incoming.put_nowait(message)

    def drop(self) -> None:
        """Simulate the server closing the connection"""
        self.closed = True
        self._incoming.put_nowait(_CLOSE)

    def __aiter__(self):
        return self

    async def __anext__(self):
        item = await self._incoming.get()
        if item is _CLOSE:
            raise StopAsyncIteration
        return item


class FakeTransport:
    """connect_factory handing out FakeWebSockets"""

    def __init__(self):
        self.sockets: List[FakeWebSocket] = []
        self.calls = 0
        self.call_times: List[float] = []
        self.failures = 0
        self.gate: Optional[asyncio.Event] = None

    async def __call__(self, url, **kwargs):
        self.calls += 1
        self.call_times.append(asyncio.get_running_loop().time())
        if self.gate is not None:
            await self.gate.wait()
        if self.failures:
            self.failures -= 1
            raise ConnectionRefusedError("connection refused")
        websocket = FakeWebSocket()
        self.sockets.append(websocket)
        return websocket

    @property
    def current(self) -> FakeWebSocket:
        return self.sockets[-1]


async def wait_until(predicate, timeout: float = 2.0) -> None:
    """Let the event loop run until predicate() holds"""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.001)


async def settle(rounds: int = 20) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def make_client(transport):
    """Build an OpenAlgoWebSocket wired to the fake transport"""
    def _make(**kwargs):
        options = {
            'ws_url': 'ws://test.local:8765',
            'connect_factory': transport,
            'reconnect_delay': 0,
        }
        options.update(kwargs)
        return OpenAlgoWebSocket('test-key', **options)
    return _make


@pytest.fixture
def mock_session():
    """requests.Session double with a real headers dict"""
    session = Mock(spec=requests.Session)
    session.headers = {}
    return session


def make_response(status_code: int = 200, body=None, raw: bytes = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.url = 'http://127.0.0.1:5000/api/v1/test'
    if raw is not None:
        response._content = raw
    else:
        response._content = json.dumps(body if body is not None else {}).encode()
    return response
