import pytest

from monocommander.rpc.endpoints import (
    DefaultPorts,
    EndpointOptions,
    Endpoints,
    get_default_ports,
    get_local_endpoints,
    get_remote_endpoints,
    resolve_endpoints,
)

NETWORKS = ["Localnet", "Sprintnet", "Testnet", "Mainnet"]
LOCAL = Endpoints(
    comet_rpc="http://localhost:26657",
    cosmos_rest="http://localhost:1317",
    evm_rpc="http://localhost:8545",
)


@pytest.mark.parametrize("network", NETWORKS + ["Unknown"])
def test_default_ports_are_standard(network):
    assert get_default_ports(network) == DefaultPorts(26657, 1317, 8545)


def test_local_endpoints_default_host():
    assert get_local_endpoints("", DefaultPorts()) == LOCAL


def test_local_endpoints_use_given_host_and_ports():
    ports = DefaultPorts(comet_rpc=1, cosmos_rest=2, evm_rpc=3)
    eps = get_local_endpoints("10.0.0.5", ports)
    assert eps.comet_rpc == "http://10.0.0.5:1"
    assert eps.cosmos_rest == "http://10.0.0.5:2"
    assert eps.evm_rpc == "http://10.0.0.5:3"


def test_remote_endpoints_for_sprintnet():
    assert get_remote_endpoints("Sprintnet") == Endpoints(
        "https://rpc.sprintnet.monolythium.com",
        "https://api.sprintnet.monolythium.com",
        "https://evm.sprintnet.monolythium.com",
    )


def test_remote_endpoints_for_mainnet():
    eps = get_remote_endpoints("Mainnet")
    assert eps.comet_rpc == "https://rpc.monolythium.com"
    assert eps.evm_rpc == "https://evm.monolythium.com"


def test_remote_endpoints_for_localnet_are_local():
    assert get_remote_endpoints("Localnet") == LOCAL


def test_resolve_local_by_default():
    assert resolve_endpoints("Testnet", EndpointOptions()) == LOCAL


def test_resolve_remote():
    opts = EndpointOptions(use_remote=True)
    assert resolve_endpoints("Testnet", opts) == get_remote_endpoints("Testnet")


def test_resolve_custom_host():
    eps = resolve_endpoints("Localnet", EndpointOptions(host="node.internal"))
    assert eps.comet_rpc.startswith("http://node.internal:")
    assert eps.cosmos_rest.startswith("http://node.internal:")


def test_resolve_applies_only_non_empty_overrides():
    opts = EndpointOptions(use_remote=True, evm_rpc="http://custom:8545")
    eps = resolve_endpoints("Mainnet", opts)
    remote = get_remote_endpoints("Mainnet")
    assert eps.evm_rpc == "http://custom:8545"
    assert eps.comet_rpc == remote.comet_rpc
    assert eps.cosmos_rest == remote.cosmos_rest


def test_resolve_does_not_mutate_remote_table():
    resolve_endpoints("Sprintnet", EndpointOptions(use_remote=True, comet_rpc="http://x:1"))
    assert get_remote_endpoints("Sprintnet").comet_rpc == "https://rpc.sprintnet.monolythium.com"