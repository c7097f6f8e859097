"""systemd unit management for the Mesh/Rosetta sidecar."""

from __future__ import annotations

import os
import re
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import PurePosixPath

from monocommander.mesh.config import NetworkName, binary_install_path, config_path

SYSTEMD_DIR = "/etc/systemd/system"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class SystemctlError(Exception):
    """Raised when a systemctl command fails."""

    def __init__(self, message: str, result: object | None = None) -> None:
        super().__init__(message)
        self.result = result


@dataclass
class SystemdConfig:
    """Settings that go into the sidecar's systemd unit."""

    network: str
    user: str
    binary_path: str
    config_path: str
    description: str = ""
    after: str = "network-online.target"
    restart: str = "on-failure"
    restart_sec: int = 10


@dataclass
class EnableResult:
    unit_path: str = ""
    unit_name: str = ""
    config_path: str = ""
    enabled: bool = False
    started: bool = False
    error: Exception | None = None


@dataclass
class DisableResult:
    unit_name: str = ""
    stopped: bool = False
    disabled: bool = False
    error: Exception | None = None


@dataclass
class ServiceStatus:
    active: bool = False
    active_state: str = ""
    sub_state: str = ""
    main_pid: int = 0
    error: Exception | None = None


def default_systemd_config(
    network: str, user: str, home: str, net_name: NetworkName | str
) -> SystemdConfig:
    """Return the standard unit settings for the sidecar on ``network``."""
    return SystemdConfig(
        network=network,
        user=user,
        binary_path=binary_install_path(False),
        config_path=config_path(home, net_name),
        description=f"Mesh/Rosetta API Sidecar ({network})",
    )


def unit_name(network: str) -> str:
    """Return the systemd unit name for ``network``."""
    return f"mono-mesh@{network.lower()}.service"


def unit_path(network: str) -> str:
    """Return the full path of the unit file for ``network``."""
    return str(PurePosixPath(SYSTEMD_DIR) / unit_name(network))


def generate_systemd_unit(cfg: SystemdConfig) -> str:
    """Render the unit file text for ``cfg``."""
    config_dir = os.path.dirname(cfg.config_path) or "."
    return (
        "[Unit]\n"
        f"Description={cfg.description}\n"
        f"After={cfg.after}\n"
        "Wants=network-online.target\n"
        "\n"
        "[Service]\n"
        f"User={cfg.user}\n"
        f"Group={cfg.user}\n"
        "Type=simple\n"
        f"ExecStart={cfg.binary_path} --config {cfg.config_path}\n"
        f"Restart={cfg.restart}\n"
        f"RestartSec={cfg.restart_sec}\n"
        "LimitNOFILE=65535\n"
        "\n"
        "# Security hardening\n"
        "NoNewPrivileges=true\n"
        "PrivateTmp=true\n"
        "ProtectSystem=strict\n"
        "ProtectHome=read-only\n"
        f"ReadWritePaths={config_dir}\n"
        "\n"
        "[Install]\n"
        "WantedBy=multi-user.target\n"
    )


def write_systemd_unit(cfg: SystemdConfig, dry_run: bool) -> tuple[str, str]:
    """Write the unit file and return its path and content; ``dry_run`` writes nothing."""
    content = generate_systemd_unit(cfg)
    path = unit_path(cfg.network)

    if dry_run:
        return path, content

    if not os.path.exists(SYSTEMD_DIR):
        raise FileNotFoundError(f"systemd not available: {SYSTEMD_DIR} does not exist")

    try:
        with open(path, "w", encoding="utf-8") as handle:
            handle.write(content)
        os.chmod(path, 0o644)
    except OSError as exc:
        raise OSError(f"failed to write unit file (do you need sudo?): {exc}") from exc

    return path, content


def _run_systemctl(*args: str) -> None:
    try:
        completed = subprocess.run(
            ["systemctl", *args], stdout=subprocess.PIPE, stderr=subprocess.STDOUT
        )
    except OSError as exc:
        raise SystemctlError(f"{exc}: ") from exc
    if completed.returncode != 0:
        output = (completed.stdout or b"").decode("utf-8", errors="replace")
        raise SystemctlError(f"exit status {completed.returncode}: {output}")


def enable_service(network: str, dry_run: bool) -> EnableResult:
    """Reload systemd, then enable and start the sidecar unit."""
    name = unit_name(network)
    result = EnableResult(unit_path=unit_path(network), unit_name=name)
    if dry_run:
        return result

    steps = (
        (("daemon-reload",), "failed to reload daemon", None),
        (("enable", name), "failed to enable service", "enabled"),
        (("start", name), "failed to start service", "started"),
    )
    for args, message, flag in steps:
        try:
            _run_systemctl(*args)
        except SystemctlError as exc:
            error = SystemctlError(f"{message}: {exc}", result)
            result.error = error
            raise error from exc
        if flag:
            setattr(result, flag, True)
    return result


def disable_service(network: str, dry_run: bool) -> DisableResult:
    """Stop and disable the sidecar unit; a unit that is not loaded is not an error."""
    name = unit_name(network)
    result = DisableResult(unit_name=name)
    if dry_run:
        return result

    steps = (
        ("stop", "failed to stop service", "stopped"),
        ("disable", "failed to disable service", "disabled"),
    )
    for action, message, flag in steps:
        try:
            _run_systemctl(action, name)
        except SystemctlError as exc:
            if "not loaded" not in str(exc):
                error = SystemctlError(f"{message}: {exc}", result)
                result.error = error
                raise error from exc
        setattr(result, flag, True)
    return result


def _output(*args: str) -> str | None:
    try:
        completed = subprocess.run(["systemctl", *args], capture_output=True)
    except OSError:
        return None
    if completed.returncode != 0:
        return None
    return (completed.stdout or b"").decode("utf-8", errors="replace")


def _property(name: str, prop: str) -> str | None:
    out = _output("show", name, f"--property={prop}")
    if out is None:
        return None
    key, sep, value = out.strip().partition("=")
    return value if sep else None


def get_service_status(network: str) -> ServiceStatus:
    """Query systemd for the state of the sidecar unit."""
    name = unit_name(network)
    status = ServiceStatus()

    out = _output("is-active", name)
    if out is None:
        status.active_state = "inactive"
    else:
        status.active_state = out.strip()
        status.active = status.active_state == "active"

    sub_state = _property(name, "SubState")
    if sub_state is not None:
        status.sub_state = sub_state

    main_pid = _property(name, "MainPID")
    if main_pid is not None:
        match = _LEADING_INT.match(main_pid)
        if match:
            status.main_pid = int(match.group(1))

    return status


def systemd_instructions(unit_path: str, unit_name: str) -> str:
    """Return manual steps for enabling the sidecar unit."""
    return (
        "\n"
        f"Systemd unit file written to: {unit_path}\n"
        "\n"
        "To enable and start the service:\n"
        "  sudo systemctl daemon-reload\n"
        f"  sudo systemctl enable {unit_name}\n"
        f"  sudo systemctl start {unit_name}\n"
        "\n"
        "To check status:\n"
        f"  sudo systemctl status {unit_name}\n"
        "\n"
        "To view logs:\n"
        f"  sudo journalctl -u {unit_name} -f\n"
    )


def is_systemd_available() -> bool:
    """Report whether ``systemctl`` is on the PATH."""
    return shutil.which("systemctl") is not None