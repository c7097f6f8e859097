"""Client for the EVM JSON-RPC interface."""

from __future__ import annotations

from typing import Any

import requests

from monocommander.rpc.client import JSONHTTPClient, RPCError

_UINT64_LIMIT = 1 << 64


class JSONRPCError(RPCError):
    """An error object returned by the JSON-RPC server."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(f"RPC error {code}: {message}")
        self.code = code
        self.message = message


def _parse_uint(text: str) -> int:
    """Parse an unsigned 64-bit integer, detecting the base from its prefix."""
    if not text or text != text.strip() or text[0] in "+-":
        raise ValueError(f"invalid syntax: {text!r}")
    if len(text) > 1 and text[0] == "0" and text[1].lower() not in "xob":
        value = int(text[1:], 8)
    else:
        value = int(text, 0)
    if value >= _UINT64_LIMIT:
        raise ValueError(f"value out of range: {text!r}")
    return value


class EVMClient(JSONHTTPClient):
    """Speaks JSON-RPC to an EVM endpoint."""

    def call(self, method: str, params: list) -> Any:
        """Invoke ``method`` and return its decoded ``result``."""
        payload = {"jsonrpc": "2.0", "method": method, "params": list(params), "id": 1}
        with self._request("POST", self.base_url, json=payload) as resp:
            if resp.status_code != requests.codes.ok:
                raise RPCError(
                    f"unexpected status code {resp.status_code} from {self.base_url}"
                )
            try:
                body = resp.json()
            except ValueError as exc:
                raise RPCError(f"failed to parse response: {exc}") from exc

        if not isinstance(body, dict):
            raise RPCError("failed to parse response: expected a JSON object")

        error = body.get("error")
        if error is not None:
            if not isinstance(error, dict):
                raise RPCError("failed to parse response: error is not an object")
            raise JSONRPCError(int(error.get("code") or 0), str(error.get("message") or ""))

        return body.get("result")

    def _string_result(self, method: str, what: str) -> str:
        result = self.call(method, [])
        if not isinstance(result, str):
            raise RPCError(f"failed to parse {what}: expected a string")
        return result

    def _uint_result(self, method: str, what: str) -> tuple[int, str]:
        raw = self._string_result(method, what)
        try:
            return _parse_uint(raw), raw
        except ValueError as exc:
            raise RPCError(f"failed to parse {what} hex: {exc}") from exc

    def chain_id(self) -> tuple[int, str]:
        """Return the chain ID as a number and as the server's hex string."""
        return self._uint_result("eth_chainId", "chain ID")

    def block_number(self) -> tuple[int, str]:
        """Return the latest block number as a number and as the hex string."""
        return self._uint_result("eth_blockNumber", "block number")

    def client_version(self) -> str:
        return self._string_result("web3_clientVersion", "client version")

    def net_version(self) -> str:
        return self._string_result("net_version", "net version")