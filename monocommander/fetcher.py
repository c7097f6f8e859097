"""Downloading of remote resources over HTTP."""

from __future__ import annotations

import requests

DEFAULT_TIMEOUT = 30.0


class FetchError(Exception):
    """Raised when a resource cannot be downloaded."""


class HTTPFetcher:
    """Fetches URLs over HTTP and returns their bodies."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()

    def fetch(self, url: str) -> bytes:
        """Return the body of ``url``; any status but 200 is an error."""
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise FetchError(f"failed to fetch {url}: {exc}") from exc

        with resp:
            if resp.status_code != requests.codes.ok:
                raise FetchError(f"failed to fetch {url}: HTTP {resp.status_code}")
            try:
                return resp.content
            except requests.RequestException as exc:
                raise FetchError(f"failed to read response from {url}: {exc}") from exc