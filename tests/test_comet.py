import pytest
import requests
import responses

from monocommander.rpc.client import RPCError
from monocommander.rpc.comet import (
    CometClient,
    PeerInfo,
    StatusResponse,
    parse_net_info,
    parse_status,
)

BASE = "http://localhost:26657"

STATUS_BODY = {
    "result": {
        "node_info": {"network": "mono-sprint-1", "moniker": "alpha", "version": "0.38.0"},
        "sync_info": {
            "latest_block_height": "1234",
            "latest_block_time": "2024-01-01T00:00:00Z",
            "catching_up": True,
        },
        "validator_info": {"address": "ABCDEF", "voting_power": "10"},
    }
}

NET_INFO_BODY = {
    "result": {
        "listening": True,
        "listeners": ["Listener(@)"],
        "n_peers": "2",
        "peers": [
            {"node_info": {"moniker": "p1"}, "remote_ip": "10.0.0.1"},
            {"node_info": {"moniker": "p2"}, "remote_ip": "10.0.0.2"},
        ],
    }
}


@pytest.fixture
def mocked():
    with responses.RequestsMock() as rsps:
        yield rsps


def test_parse_status_reads_all_sections():
    status = parse_status(STATUS_BODY)
    assert status.node_info.network == "mono-sprint-1"
    assert status.node_info.moniker == "alpha"
    assert status.sync_info.latest_block_height == "1234"
    assert status.sync_info.catching_up is True
    assert status.validator_info.voting_power == "10"


def test_parse_status_missing_fields_take_zero_values():
    assert parse_status({}) == StatusResponse()
    assert parse_status(None) == StatusResponse()


def test_parse_status_rejects_wrong_types():
    with pytest.raises(ValueError):
        parse_status({"result": {"sync_info": {"catching_up": "yes"}}})
    with pytest.raises(ValueError):
        parse_status([1, 2])


def test_parse_net_info():
    info = parse_net_info(NET_INFO_BODY)
    assert info.listening is True
    assert info.listeners == ["Listener(@)"]
    assert info.n_peers == "2"
    assert info.peers == [PeerInfo("p1", "10.0.0.1"), PeerInfo("p2", "10.0.0.2")]


def test_parse_net_info_null_peers():
    info = parse_net_info({"result": {"peers": None}})
    assert info.peers == []
    assert info.listening is False


def test_client_status(mocked):
    mocked.add(responses.GET, BASE + "/status", json=STATUS_BODY)
    status = CometClient(BASE).status()
    assert status == parse_status(STATUS_BODY)


def test_client_status_bad_shape(mocked):
    mocked.add(responses.GET, BASE + "/status", json={"result": "nope"})
    with pytest.raises(RPCError, match="failed to parse status response"):
        CometClient(BASE).status()


def test_client_status_http_error(mocked):
    mocked.add(responses.GET, BASE + "/status", status=502)
    with pytest.raises(RPCError, match="unexpected status code 502"):
        CometClient(BASE).status()


def test_client_net_info(mocked):
    mocked.add(responses.GET, BASE + "/net_info", json=NET_INFO_BODY)
    info = CometClient(BASE).net_info()
    assert [p.moniker for p in info.peers] == ["p1", "p2"]


def test_client_net_info_invalid_json(mocked):
    mocked.add(responses.GET, BASE + "/net_info", body="{broken")
    with pytest.raises(RPCError, match="failed to parse net_info response"):
        CometClient(BASE).net_info()


def test_health_ok_queries_health_path(mocked):
    mocked.add(responses.GET, BASE + "/health", json={})
    assert CometClient(BASE).health() is None
    assert mocked.calls[0].request.url == BASE + "/health"


def test_health_unhealthy(mocked):
    mocked.add(responses.GET, BASE + "/health", status=503)
    with pytest.raises(RPCError, match="node unhealthy: status 503"):
        CometClient(BASE).health()


def test_health_unreachable(mocked):
    mocked.add(responses.GET, BASE + "/health", body=requests.ConnectionError("down"))
    with pytest.raises(RPCError, match="failed to connect to"):
        CometClient(BASE).health()