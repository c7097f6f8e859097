"""Client for the CometBFT RPC interface."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import requests

from monocommander.rpc.client import JSONHTTPClient, RPCError


def _root(data: Any) -> dict:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object")
    return data


def _obj(data: dict, key: str) -> dict:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{key}: expected an object")
    return value


def _str(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{key}: expected a string")
    return value


def _bool(data: dict, key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"{key}: expected a boolean")
    return value


def _list(data: dict, key: str) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{key}: expected an array")
    return value


@dataclass
class NodeInfo:
    network: str = ""
    moniker: str = ""
    version: str = ""


@dataclass
class SyncInfo:
    latest_block_height: str = ""
    latest_block_time: str = ""
    catching_up: bool = False


@dataclass
class ValidatorInfo:
    address: str = ""
    voting_power: str = ""


@dataclass
class StatusResponse:
    """The interesting parts of a ``/status`` reply."""

    node_info: NodeInfo = field(default_factory=NodeInfo)
    sync_info: SyncInfo = field(default_factory=SyncInfo)
    validator_info: ValidatorInfo = field(default_factory=ValidatorInfo)


@dataclass
class PeerInfo:
    moniker: str = ""
    remote_ip: str = ""


@dataclass
class NetInfoResponse:
    """The interesting parts of a ``/net_info`` reply."""

    listening: bool = False
    listeners: list[str] = field(default_factory=list)
    n_peers: str = ""
    peers: list[PeerInfo] = field(default_factory=list)


def parse_status(data: Any) -> StatusResponse:
    """Build a StatusResponse from a decoded ``/status`` body."""
    result = _obj(_root(data), "result")
    node = _obj(result, "node_info")
    sync = _obj(result, "sync_info")
    validator = _obj(result, "validator_info")
    return StatusResponse(
        node_info=NodeInfo(
            network=_str(node, "network"),
            moniker=_str(node, "moniker"),
            version=_str(node, "version"),
        ),
        sync_info=SyncInfo(
            latest_block_height=_str(sync, "latest_block_height"),
            latest_block_time=_str(sync, "latest_block_time"),
            catching_up=_bool(sync, "catching_up"),
        ),
        validator_info=ValidatorInfo(
            address=_str(validator, "address"),
            voting_power=_str(validator, "voting_power"),
        ),
    )


def parse_net_info(data: Any) -> NetInfoResponse:
    """Build a NetInfoResponse from a decoded ``/net_info`` body."""
    result = _obj(_root(data), "result")
    listeners = _list(result, "listeners")
    if not all(isinstance(item, str) for item in listeners):
        raise ValueError("listeners: expected strings")
    peers = []
    for raw in _list(result, "peers"):
        peer = _root(raw)
        peers.append(
            PeerInfo(
                moniker=_str(_obj(peer, "node_info"), "moniker"),
                remote_ip=_str(peer, "remote_ip"),
            )
        )
    return NetInfoResponse(
        listening=_bool(result, "listening"),
        listeners=list(listeners),
        n_peers=_str(result, "n_peers"),
        peers=peers,
    )


class CometClient(JSONHTTPClient):
    """Queries a CometBFT RPC endpoint."""

    def status(self) -> StatusResponse:
        data = self.get_json("/status", "status")
        try:
            return parse_status(data)
        except ValueError as exc:
            raise RPCError(f"failed to parse status response: {exc}") from exc

    def net_info(self) -> NetInfoResponse:
        data = self.get_json("/net_info", "net_info")
        try:
            return parse_net_info(data)
        except ValueError as exc:
            raise RPCError(f"failed to parse net_info response: {exc}") from exc

    def health(self) -> None:
        """Raise RPCError unless ``/health`` answers with 200."""
        with self._request("GET", self.base_url + "/health") as resp:
            if resp.status_code != requests.codes.ok:
                raise RPCError(f"node unhealthy: status {resp.status_code}")