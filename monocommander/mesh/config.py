"""Configuration of the Mesh/Rosetta API sidecar."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any

DEFAULT_MESH_PORT = 8080
DEFAULT_NODE_RPC_PORT = 26657
DEFAULT_NODE_GRPC_PORT = 9090
DEFAULT_RETRY_COUNT = 3
BINARY_NAME = "mono-mesh-rosetta"
SYSTEM_BINARY_PATH = "/usr/local/bin/" + BINARY_NAME


class NetworkName(str, Enum):
    """Canonical network names."""

    LOCALNET = "Localnet"
    SPRINTNET = "Sprintnet"
    TESTNET = "Testnet"
    MAINNET = "Mainnet"

    def __str__(self) -> str:
        return self.value


NETWORK_MESH_PORTS: dict[NetworkName, int] = {
    NetworkName.LOCALNET: 8080,
    NetworkName.SPRINTNET: 8081,
    NetworkName.TESTNET: 8082,
    NetworkName.MAINNET: 8083,
}

_CHAIN_IDS: dict[NetworkName, str] = {
    NetworkName.LOCALNET: "mono-local-1",
    NetworkName.SPRINTNET: "mono-sprint-1",
    NetworkName.TESTNET: "mono-test-1",
    NetworkName.MAINNET: "mono-1",
}


class ConfigError(Exception):
    """Raised when a configuration cannot be read, written or validated."""


def _name(network: NetworkName | str) -> str:
    return network.value if isinstance(network, NetworkName) else str(network)


def _known(network: NetworkName | str) -> NetworkName | None:
    try:
        return NetworkName(_name(network))
    except ValueError:
        return None


@dataclass
class MergeOptions:
    """Command-line values that override a loaded configuration."""

    listen_address: str = ""
    node_rpc_url: str = ""
    node_grpc_address: str = ""


@dataclass
class Config:
    """Settings of the Mesh/Rosetta sidecar."""

    chain_id: str = ""
    network: str = ""
    node_rpc_url: str = ""
    node_grpc_address: str = ""
    listen_address: str = ""
    offline: bool = False
    retry_count: int = 0

    def validate(self) -> None:
        """Raise ConfigError naming the first required field that is empty."""
        for name in (
            "chain_id",
            "network",
            "node_rpc_url",
            "node_grpc_address",
            "listen_address",
        ):
            if not getattr(self, name):
                raise ConfigError(f"{name} is required")

    def merge(self, opts: MergeOptions) -> None:
        """Apply every non-empty override from ``opts``."""
        if opts.listen_address:
            self.listen_address = opts.listen_address
        if opts.node_rpc_url:
            self.node_rpc_url = opts.node_rpc_url
        if opts.node_grpc_address:
            self.node_grpc_address = opts.node_grpc_address


_STRING_FIELDS = ("chain_id", "network", "node_rpc_url", "node_grpc_address", "listen_address")


def _to_dict(cfg: Config) -> dict[str, Any]:
    data: dict[str, Any] = {name: getattr(cfg, name) for name in _STRING_FIELDS}
    if cfg.offline:
        data["offline"] = True
    if cfg.retry_count:
        data["retry_count"] = cfg.retry_count
    return data


def _from_dict(data: Any) -> Config:
    if data is None:
        return Config()
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object")
    cfg = Config()
    for name in _STRING_FIELDS:
        value = data.get(name)
        if value is None:
            continue
        if not isinstance(value, str):
            raise ValueError(f"{name}: expected a string")
        setattr(cfg, name, value)
    offline = data.get("offline")
    if offline is not None:
        if not isinstance(offline, bool):
            raise ValueError("offline: expected a boolean")
        cfg.offline = offline
    retry = data.get("retry_count")
    if retry is not None:
        if isinstance(retry, bool) or not isinstance(retry, int):
            raise ValueError("retry_count: expected an integer")
        cfg.retry_count = retry
    return cfg


def _marshal(cfg: Config) -> str:
    text = json.dumps(_to_dict(cfg), indent=2, ensure_ascii=False)
    return text.replace("&", "\\u0026").replace("<", "\\u003c").replace(">", "\\u003e")


def default_config(network: NetworkName | str) -> Config:
    """Return the standard configuration for ``network``."""
    known = _known(network)
    chain_id = _CHAIN_IDS.get(known, "") if known is not None else ""
    port = NETWORK_MESH_PORTS.get(known, DEFAULT_MESH_PORT) if known is not None else DEFAULT_MESH_PORT
    return Config(
        chain_id=chain_id,
        network=_name(network),
        node_rpc_url=f"http://localhost:{DEFAULT_NODE_RPC_PORT}",
        node_grpc_address=f"localhost:{DEFAULT_NODE_GRPC_PORT}",
        listen_address=f"0.0.0.0:{port}",
        retry_count=DEFAULT_RETRY_COUNT,
    )


def config_dir(home: str, network: NetworkName | str) -> str:
    """Return the directory holding the sidecar configuration."""
    return os.path.join(home, ".mono", _name(network), "mesh-rosetta")


def config_path(home: str, network: NetworkName | str) -> str:
    """Return the path of the sidecar configuration file."""
    return os.path.join(config_dir(home, network), "config.json")


def load_config_from_path(path: str) -> Config:
    """Read a configuration from ``path``."""
    try:
        with open(path, encoding="utf-8") as handle:
            text = handle.read()
    except OSError as exc:
        raise ConfigError(f"failed to read config: {exc}") from exc
    try:
        return _from_dict(json.loads(text))
    except ValueError as exc:
        raise ConfigError(f"failed to parse config: {exc}") from exc


def load_config(home: str, network: NetworkName | str) -> Config:
    """Read the configuration from its default location."""
    return load_config_from_path(config_path(home, network))


def save_config_to_path(path: str, cfg: Config, dry_run: bool) -> str:
    """Write ``cfg`` as JSON to ``path`` and return the text; ``dry_run`` writes nothing."""
    content = _marshal(cfg)
    if dry_run:
        return content

    directory = os.path.dirname(path)
    if directory:
        try:
            os.makedirs(directory, 0o755, exist_ok=True)
        except OSError as exc:
            raise ConfigError(f"failed to create config directory: {exc}") from exc
    try:
        with open(path, "w", encoding="utf-8") as handle:
            handle.write(content)
    except OSError as exc:
        raise ConfigError(f"failed to write config: {exc}") from exc
    return content


def save_config(home: str, network: NetworkName | str, cfg: Config, dry_run: bool) -> str:
    """Write ``cfg`` to its default location and return the text."""
    return save_config_to_path(config_path(home, network), cfg, dry_run)


def binary_install_path(use_system_path: bool) -> str:
    """Return where the sidecar binary is installed; user-local unless asked otherwise."""
    if use_system_path:
        return SYSTEM_BINARY_PATH
    return os.path.join(os.path.expanduser("~"), ".local", "bin", BINARY_NAME)


def config_exists(home: str, network: NetworkName | str) -> bool:
    """Report whether the configuration file exists."""
    return os.path.exists(config_path(home, network))