"""Pytest fixtures shared by the client tests."""

import json

import httpx
import pytest

from uckb_jsonrpc.client.rpc_client import AsyncCkbClient, CkbClient
from uckb_jsonrpc.testing.mock_node import MockNode
from uckb_jsonrpc.transport.http import AsyncHttpTransport, HttpTransport

NODE_URL = "http://node.test/"

H1 = "0x" + "11" * 32
H2 = "0x" + "22" * 32
H3 = "0x" + "33" * 32


def header_json(number: str = "0x400", hash_: str = H1) -> dict:
    return {
        "version": "0x0",
        "compact_target": "0x1e083126",
        "timestamp": "0x16e70e6985c",
        "number": number,
        "epoch": "0x7080018000001",
        "parent_hash": H2,
        "transactions_root": H3,
        "proposals_hash": "0x" + "00" * 32,
        "extra_hash": "0x" + "00" * 32,
        "dao": "0x" + "ab" * 32,
        "nonce": "0x0",
        "hash": hash_,
    }


def transaction_json(hash_: str = H3) -> dict:
    return {
        "version": "0x0",
        "cell_deps": [
            {"out_point": {"tx_hash": H1, "index": "0x0"}, "dep_type": "dep_group"},
        ],
        "header_deps": [],
        "inputs": [
            {"since": "0x0", "previous_output": {"tx_hash": H2, "index": "0x1"}},
        ],
        "outputs": [
            {
                "capacity": "0x2540be400",
                "lock": {"code_hash": H1, "hash_type": "type", "args": "0x" + "aa" * 20},
            },
            {
                "capacity": "0x174876e800",
                "lock": {"code_hash": H1, "hash_type": "type", "args": "0x"},
                "type": {"code_hash": H2, "hash_type": "data1", "args": "0x01"},
            },
        ],
        "outputs_data": ["0x", "0x1234"],
        "witnesses": ["0x55000000"],
        "hash": hash_,
    }


def block_json(number: str = "0x0") -> dict:
    return {
        "header": header_json(number=number),
        "uncles": [],
        "transactions": [transaction_json()],
        "proposals": ["0x" + "01" * 10],
    }


class Recorder:
    """httpx.MockTransport handler that records requests and replays canned bodies."""

    def __init__(self, reply):
        self.reply = reply
        self.bodies = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.bodies.append(body)
        reply = self.reply(body) if callable(self.reply) else self.reply
        if isinstance(reply, httpx.Response):
            return reply
        if isinstance(reply, (bytes, str)):
            return httpx.Response(200, content=reply)
        return httpx.Response(200, json=reply)


def echo_result(result):
    """Reply with `result`, echoing the request id."""
    return lambda body: {"jsonrpc": "2.0", "id": body["id"], "result": result}


@pytest.fixture
def make_client():
    clients = []

    def factory(reply, **kwargs):
        recorder = Recorder(reply)
        http = httpx.Client(transport=httpx.MockTransport(recorder))
        client = CkbClient(NODE_URL, transport=HttpTransport(NODE_URL, client=http), **kwargs)
        clients.append(http)
        return client, recorder

    yield factory
    for http in clients:
        http.close()


@pytest.fixture
def make_async_client():
    def factory(reply, **kwargs):
        recorder = Recorder(reply)
        http = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
        client = AsyncCkbClient(NODE_URL, transport=AsyncHttpTransport(NODE_URL, client=http), **kwargs)
        return client, recorder

    return factory


@pytest.fixture
def node():
    return MockNode()
