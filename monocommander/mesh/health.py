"""Health checks for the Mesh/Rosetta API sidecar."""

from __future__ import annotations

import os
import socket
import time
from dataclasses import dataclass
from typing import Any

import requests

from monocommander.mesh.config import (
    Config,
    NetworkName,
    binary_install_path,
    config_exists,
    load_config,
)
from monocommander.mesh.systemd import (
    ServiceStatus,
    get_service_status,
    is_systemd_available,
)
from monocommander.mesh.config import ConfigError

DEFAULT_TIMEOUT = 5.0
DEFAULT_TCP_PORT = "8080"

METHOD_HEALTH_ENDPOINT = "health_endpoint"
METHOD_NETWORK_LIST = "network_list"
METHOD_TCP_PORT = "tcp_port"

_TCP_ONLY_NOTE = (
    "TCP port is open, but HTTP health check failed. Service may be starting up."
)


@dataclass
class HealthStatus:
    """Outcome of a health check against the sidecar."""

    healthy: bool = False
    method: str = ""
    listen_address: str = ""
    response_time: int = 0
    details: dict[str, Any] | None = None
    error: str = ""


@dataclass
class CheckResult:
    """Combined view of the sidecar's installation and runtime health."""

    service_health: HealthStatus | None = None
    systemd_status: ServiceStatus | None = None
    config_exists: bool = False
    binary_exists: bool = False


def normalize_address_to_url(address: str) -> str:
    """Turn a listen address, host:port or bare port into an HTTP base URL."""
    if address.startswith(("http://", "https://")):
        return address.removesuffix("/")

    if address.startswith(("0.0.0.0:", "127.0.0.1:", "localhost:")):
        return "http://" + address.replace("0.0.0.0", "127.0.0.1", 1)

    if ":" not in address:
        return "http://127.0.0.1:" + address

    return "http://" + address


def _tcp_target(address: str) -> tuple[str, int] | None:
    addr = address.removeprefix("http://").removeprefix("https://")
    if ":" not in addr:
        addr += ":" + DEFAULT_TCP_PORT
    host, _, port_text = addr.rpartition(":")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        port = int(port_text)
    except ValueError:
        return None
    if not 0 <= port <= 65535:
        return None
    return host, port


class HealthChecker:
    """Probes the sidecar over HTTP, falling back to a plain TCP connect."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()

    def check(self, listen_address: str) -> HealthStatus:
        """Check the service, trying ``/health``, then ``/network/list``, then TCP."""
        status = HealthStatus(listen_address=listen_address)
        start = time.monotonic()

        def elapsed_ms() -> int:
            return int((time.monotonic() - start) * 1000)

        url = normalize_address_to_url(listen_address)

        if self._check_http(status, "GET", url + "/health"):
            status.healthy = True
            status.method = METHOD_HEALTH_ENDPOINT
            status.response_time = elapsed_ms()
            return status

        if self._check_http(
            status,
            "POST",
            url + "/network/list",
            data="{}",
            headers={"Content-Type": "application/json"},
        ):
            status.healthy = True
            status.method = METHOD_NETWORK_LIST
            status.response_time = elapsed_ms()
            return status

        status.method = METHOD_TCP_PORT
        if self._check_tcp_port(listen_address):
            status.healthy = True
            status.details = {"note": _TCP_ONLY_NOTE}
        else:
            status.healthy = False
            status.error = "service not responding"
        status.response_time = elapsed_ms()
        return status

    def check_with_config(self, cfg: Config) -> HealthStatus:
        """Check the service at the listen address of ``cfg``."""
        return self.check(cfg.listen_address)

    def _check_http(
        self, status: HealthStatus, method: str, url: str, **kwargs: Any
    ) -> bool:
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException:
            return False
        with resp:
            if resp.status_code != requests.codes.ok:
                return False
            try:
                body = resp.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                status.details = body
        return True

    def _check_tcp_port(self, address: str) -> bool:
        target = _tcp_target(address)
        if target is None:
            return False
        try:
            with socket.create_connection(target, timeout=self.timeout):
                return True
        except OSError:
            return False


def binary_exists(use_system_path: bool) -> bool:
    """Report whether the sidecar binary is at its install location."""
    return os.path.exists(binary_install_path(use_system_path))


def full_check(network: str, home: str, net_name: NetworkName | str) -> CheckResult:
    """Gather configuration, installation, systemd and service health in one result."""
    result = CheckResult()
    result.config_exists = config_exists(home, net_name)
    result.binary_exists = binary_exists(False) or binary_exists(True)

    if is_systemd_available():
        result.systemd_status = get_service_status(network)

    if result.config_exists:
        try:
            cfg = load_config(home, net_name)
        except ConfigError:
            cfg = None
        if cfg is not None:
            result.service_health = HealthChecker().check_with_config(cfg)

    return result