"""Default RPC endpoints for each network, with override handling."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

_LOCALNET = "Localnet"
_SPRINTNET = "Sprintnet"
_TESTNET = "Testnet"
_MAINNET = "Mainnet"


@dataclass(frozen=True)
class DefaultPorts:
    """Default ports for each RPC kind."""

    comet_rpc: int = 26657
    cosmos_rest: int = 1317
    evm_rpc: int = 8545


@dataclass
class Endpoints:
    """RPC endpoint URLs for one network."""

    comet_rpc: str
    cosmos_rest: str
    evm_rpc: str


@dataclass
class EndpointOptions:
    """Overrides applied when resolving endpoints."""

    comet_rpc: str = ""
    cosmos_rest: str = ""
    evm_rpc: str = ""
    host: str = ""
    use_remote: bool = False


_REMOTE = {
    _SPRINTNET: (
        "https://rpc.sprintnet.monolythium.com",
        "https://api.sprintnet.monolythium.com",
        "https://evm.sprintnet.monolythium.com",
    ),
    _TESTNET: (
        "https://rpc.testnet.monolythium.com",
        "https://api.testnet.monolythium.com",
        "https://evm.testnet.monolythium.com",
    ),
    _MAINNET: (
        "https://rpc.monolythium.com",
        "https://api.monolythium.com",
        "https://evm.monolythium.com",
    ),
}


def get_default_ports(network: str) -> DefaultPorts:
    """Return the default ports for a network.

    Every network, remote ones included, assumes a local node on standard ports.
    """
    return DefaultPorts()


def get_local_endpoints(host: str, ports: DefaultPorts) -> Endpoints:
    """Return endpoints for a node on ``host`` (``localhost`` when empty)."""
    host = host or "localhost"
    return Endpoints(
        comet_rpc=f"http://{host}:{ports.comet_rpc}",
        cosmos_rest=f"http://{host}:{ports.cosmos_rest}",
        evm_rpc=f"http://{host}:{ports.evm_rpc}",
    )


def get_remote_endpoints(network: str) -> Endpoints:
    """Return the public endpoints for a network; unknown networks get local ones."""
    remote = _REMOTE.get(network)
    if remote is None:
        return get_local_endpoints("localhost", get_default_ports(network))
    return Endpoints(*remote)


def resolve_endpoints(network: str, opts: EndpointOptions) -> Endpoints:
    """Resolve endpoints for ``network`` and apply any non-empty overrides."""
    if opts.use_remote:
        endpoints = get_remote_endpoints(network)
    else:
        endpoints = get_local_endpoints(opts.host or "localhost", get_default_ports(network))

    overrides = {
        name: value
        for name, value in (
            ("comet_rpc", opts.comet_rpc),
            ("cosmos_rest", opts.cosmos_rest),
            ("evm_rpc", opts.evm_rpc),
        )
        if value
    }
    return dataclasses.replace(endpoints, **overrides)