import pytest
import requests
import responses

from monocommander.rpc.client import JSONHTTPClient, RPCError

BASE = "http://node.test"


@pytest.fixture
def mocked():
    with responses.RequestsMock() as rsps:
        yield rsps


def test_get_json_returns_decoded_body(mocked):
    mocked.add(responses.GET, BASE + "/thing", json={"a": [1, 2], "b": "x"})
    client = JSONHTTPClient(BASE)
    assert client.get_json("/thing", "thing") == {"a": [1, 2], "b": "x"}


def test_get_json_builds_url_from_base(mocked):
    mocked.add(responses.GET, BASE + "/deep/path", json={})
    JSONHTTPClient(BASE).get_json("/deep/path", "deep")
    assert mocked.calls[0].request.url == BASE + "/deep/path"


def test_get_json_rejects_non_ok_status(mocked):
    mocked.add(responses.GET, BASE + "/thing", status=500)
    with pytest.raises(RPCError, match="unexpected status code 500"):
        JSONHTTPClient(BASE).get_json("/thing", "thing")


def test_get_json_reports_parse_failure_with_name(mocked):
    mocked.add(responses.GET, BASE + "/thing", body="not json")
    with pytest.raises(RPCError, match="failed to parse widget response"):
        JSONHTTPClient(BASE).get_json("/thing", "widget")


def test_get_json_reports_connection_failure(mocked):
    mocked.add(responses.GET, BASE + "/thing", body=requests.ConnectionError("refused"))
    with pytest.raises(RPCError, match="failed to connect to"):
        JSONHTTPClient(BASE).get_json("/thing", "thing")


def test_default_timeout_is_ten_seconds():
    assert JSONHTTPClient(BASE).timeout == 10.0