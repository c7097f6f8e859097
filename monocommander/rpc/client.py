"""Shared HTTP plumbing for the node RPC clients."""

from __future__ import annotations

from typing import Any

import requests

DEFAULT_TIMEOUT = 10.0


class RPCError(Exception):
    """Raised when a node endpoint cannot be reached or answers badly."""


class JSONHTTPClient:
    """A small HTTP client bound to a base URL that decodes JSON replies."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise RPCError(f"failed to connect to {url}: {exc}") from exc

    def get_json(self, path: str, what: str) -> Any:
        """GET ``base_url + path`` and return the decoded JSON body.

        ``what`` names the response in parse error messages.
        """
        url = self.base_url + path
        with self._request("GET", url) as resp:
            if resp.status_code != requests.codes.ok:
                raise RPCError(f"unexpected status code {resp.status_code} from {url}")
            try:
                return resp.json()
            except ValueError as exc:
                raise RPCError(f"failed to parse {what} response: {exc}") from exc