import json

import pytest
import requests
import responses

from monocommander.rpc.client import RPCError
from monocommander.rpc.evm import EVMClient, JSONRPCError

BASE = "http://localhost:8545"


@pytest.fixture
def mocked():
    with responses.RequestsMock() as rsps:
        yield rsps


def reply(mocked, result):
    mocked.add(responses.POST, BASE, json={"jsonrpc": "2.0", "id": 1, "result": result})


def test_call_sends_json_rpc_envelope(mocked):
    reply(mocked, "0x1")
    result = EVMClient(BASE).call("eth_chainId", [])
    assert result == "0x1"
    request = mocked.calls[0].request
    assert json.loads(request.body) == {
        "jsonrpc": "2.0",
        "method": "eth_chainId",
        "params": [],
        "id": 1,
    }
    assert request.headers["Content-Type"] == "application/json"


def test_call_returns_result(mocked):
    reply(mocked, {"nested": [1, 2]})
    assert EVMClient(BASE).call("anything", ["a"]) == {"nested": [1, 2]}


def test_call_raises_rpc_error_object(mocked):
    mocked.add(
        responses.POST,
        BASE,
        json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32601, "message": "method not found"}},
    )
    with pytest.raises(JSONRPCError) as info:
        EVMClient(BASE).call("bogus", [])
    assert info.value.code == -32601
    assert info.value.message == "method not found"
    assert "RPC error -32601: method not found" in str(info.value)


def test_call_http_error(mocked):
    mocked.add(responses.POST, BASE, status=500)
    with pytest.raises(RPCError, match="unexpected status code 500"):
        EVMClient(BASE).call("eth_chainId", [])


def test_call_unreachable(mocked):
    mocked.add(responses.POST, BASE, body=requests.ConnectionError("refused"))
    with pytest.raises(RPCError, match="failed to connect to"):
        EVMClient(BASE).call("eth_chainId", [])


def test_chain_id_round_trip(mocked):
    value = 262144
    reply(mocked, hex(value))
    assert EVMClient(BASE).chain_id() == (value, hex(value))


def test_block_number_round_trip(mocked):
    value = 987654321
    reply(mocked, hex(value))
    assert EVMClient(BASE).block_number() == (value, hex(value))


def test_block_number_accepts_decimal(mocked):
    reply(mocked, "12345")
    assert EVMClient(BASE).block_number() == (12345, "12345")


def test_leading_zero_is_octal(mocked):
    value = 511
    text = "0" + oct(value)[2:]
    reply(mocked, text)
    assert EVMClient(BASE).block_number()[0] == value


def test_chain_id_out_of_range(mocked):
    reply(mocked, "0x" + "f" * 17)
    with pytest.raises(RPCError, match="failed to parse chain ID hex"):
        EVMClient(BASE).chain_id()


def test_chain_id_not_a_string(mocked):
    reply(mocked, 5)
    with pytest.raises(RPCError, match="failed to parse chain ID"):
        EVMClient(BASE).chain_id()


def test_block_number_garbage(mocked):
    reply(mocked, "-0x1")
    with pytest.raises(RPCError, match="failed to parse block number hex"):
        EVMClient(BASE).block_number()


def test_client_version(mocked):
    reply(mocked, "Monolythium/v1.0.0")
    assert EVMClient(BASE).client_version() == "Monolythium/v1.0.0"


def test_net_version(mocked):
    reply(mocked, "262144")
    assert EVMClient(BASE).net_version() == "262144"
    assert json.loads(mocked.calls[0].request.body)["method"] == "net_version"