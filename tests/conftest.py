"""Shared fixtures: an in-memory transport that replays canned responses."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Iterator, Union

import httpx
import pytest

from tezrpc.config import ClientConfig
from tezrpc.observability import LOGGER_NAME
from tezrpc.rpc.client import TezosClient

HOST = "http://node.test:8732"

HEAD_BLOCK = {
    "protocol": "PtParisBxoLz5gzMmn3d9WBQNoPSZakgnkMC2VNuQ3KXfUtUQeZ",
    "chain_id": "NetXdQprcVkpaWU",
    "hash": "BLockGenesisGenesisGenesisGenesisGenesisb83baZgbyZe",
    "header": {"level": 5000000, "timestamp": "2024-06-01T12:00:00Z"},
}

CONSTANTS = {
    "minimal_block_delay": "10",
    "blocks_per_cycle": 24576,
    "hard_gas_limit_per_operation": "1040000",
    "hard_gas_limit_per_block": "1386666",
    "hard_storage_limit_per_operation": "60000",
    "cost_per_byte": "250",
    "origination_size": 257,
}

HEAD_PATH = "/chains/main/blocks/head"
CONSTANTS_PATH = f"/chains/main/blocks/{HEAD_BLOCK['hash']}/context/constants"


class TruncatedStream(httpx.SyncByteStream):
    """Yields some bytes, then fails as if the connection dropped."""

    def __init__(self, chunks: list[bytes]) -> None:
        self._chunks = chunks

    def __iter__(self) -> Iterator[bytes]:
        yield from self._chunks
        raise httpx.ReadError("connection closed mid-body")


Route = Union[httpx.Response, Exception, Callable[[httpx.Request], httpx.Response]]


class FakeTransport:
    """Transport double keyed by (method, path)."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Route] = {}
        self.requests: list[httpx.Request] = []
        self.idle_closes = 0

    def add(self, method: str, path: str, route: Route) -> None:
        self.routes[(method, path)] = route

    def add_json(self, method: str, path: str, payload: Any, status_code: int = 200) -> None:
        content = json.dumps(payload).encode()
        self.add(method, path, lambda request: httpx.Response(status_code, content=content))

    def send(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, content=b"not found")
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(request)
        return route

    def close_idle_connections(self) -> None:
        self.idle_closes += 1


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def node(transport: FakeTransport) -> FakeTransport:
    """A transport serving a valid head and constants."""
    transport.add_json("GET", HEAD_PATH, HEAD_BLOCK)
    transport.add_json("GET", CONSTANTS_PATH, CONSTANTS)
    return transport


@pytest.fixture()
def client(transport: FakeTransport) -> TezosClient:
    return TezosClient(HOST, transport=transport, config=ClientConfig(host=HOST))


@pytest.fixture(autouse=True)
def _restore_library_logger() -> Iterator[None]:
    """Drop handlers installed by ``configure_logging`` during a test."""
    yield
    library_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(library_logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            library_logger.removeHandler(handler)
    library_logger.setLevel(logging.NOTSET)
    library_logger.propagate = True
