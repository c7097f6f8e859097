"""Client for the Cosmos SDK REST interface."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from monocommander.rpc.client import JSONHTTPClient, RPCError

_PREFIX = "/cosmos/base/tendermint/v1beta1"


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


@dataclass
class NodeInfoResponse:
    """Node and application details from ``node_info``."""

    network: str = ""
    moniker: str = ""
    version: str = ""
    channels: str = ""
    application_name: str = ""
    app_name: str = ""
    application_version: str = ""
    git_commit: str = ""
    go_version: str = ""


@dataclass
class SyncingResponse:
    syncing: bool = False


@dataclass
class LatestBlockResponse:
    """Identity and header of the latest block."""

    block_hash: str = ""
    chain_id: str = ""
    height: str = ""
    time: str = ""


def parse_node_info(data: Any) -> NodeInfoResponse:
    """Build a NodeInfoResponse from a decoded ``node_info`` body."""
    root = _root(data)
    node = _obj(root, "default_node_info")
    app = _obj(root, "application_version")
    return NodeInfoResponse(
        network=_str(node, "network"),
        moniker=_str(node, "moniker"),
        version=_str(node, "version"),
        channels=_str(node, "channels"),
        application_name=_str(app, "name"),
        app_name=_str(app, "app_name"),
        application_version=_str(app, "version"),
        git_commit=_str(app, "git_commit"),
        go_version=_str(app, "go_version"),
    )


def _parse_syncing(data: Any) -> SyncingResponse:
    value = _root(data).get("syncing")
    if value is None:
        return SyncingResponse()
    if not isinstance(value, bool):
        raise ValueError("syncing: expected a boolean")
    return SyncingResponse(syncing=value)


def parse_latest_block(data: Any) -> LatestBlockResponse:
    """Build a LatestBlockResponse from a decoded ``blocks/latest`` body."""
    root = _root(data)
    header = _obj(_obj(root, "block"), "header")
    return LatestBlockResponse(
        block_hash=_str(_obj(root, "block_id"), "hash"),
        chain_id=_str(header, "chain_id"),
        height=_str(header, "height"),
        time=_str(header, "time"),
    )


class CosmosClient(JSONHTTPClient):
    """Queries a Cosmos SDK REST endpoint."""

    def node_info(self) -> NodeInfoResponse:
        data = self.get_json(f"{_PREFIX}/node_info", "node_info")
        try:
            return parse_node_info(data)
        except ValueError as exc:
            raise RPCError(f"failed to parse node_info response: {exc}") from exc

    def syncing(self) -> SyncingResponse:
        data = self.get_json(f"{_PREFIX}/syncing", "syncing")
        try:
            return _parse_syncing(data)
        except ValueError as exc:
            raise RPCError(f"failed to parse syncing response: {exc}") from exc

    def latest_block(self) -> LatestBlockResponse:
        data = self.get_json(f"{_PREFIX}/blocks/latest", "latest block")
        try:
            return parse_latest_block(data)
        except ValueError as exc:
            raise RPCError(f"failed to parse latest block response: {exc}") from exc