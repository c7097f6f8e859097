"""Generation of systemd unit files for the node daemon."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import PurePosixPath

SYSTEMD_DIR = "/etc/systemd/system"


@dataclass
class SystemdConfig:
    """Settings that go into the node's systemd unit."""

    network: str
    user: str
    home: str
    binary_path: str = "/usr/local/bin/monod"
    description: str = ""
    after: str = "network-online.target"
    restart: str = "on-failure"
    restart_sec: int = 10
    use_cosmovisor: bool = False
    cosmovisor_bin: str = "/usr/local/bin/cosmovisor"


def default_systemd_config(network: str, user: str, home: str) -> SystemdConfig:
    """Return the standard unit settings for a node on ``network``."""
    return SystemdConfig(
        network=network,
        user=user,
        home=home,
        description=f"Monolythium Node ({network})",
    )


def _exec_lines(cfg: SystemdConfig) -> str:
    if cfg.use_cosmovisor:
        return (
            'Environment="DAEMON_NAME=monod"\n'
            f'Environment="DAEMON_HOME={cfg.home}"\n'
            'Environment="DAEMON_ALLOW_DOWNLOAD_BINARIES=false"\n'
            'Environment="DAEMON_RESTART_AFTER_UPGRADE=true"\n'
            'Environment="DAEMON_POLL_INTERVAL=300ms"\n'
            'Environment="UNSAFE_SKIP_BACKUP=true"\n'
            f"ExecStart={cfg.cosmovisor_bin} run start --home {cfg.home}"
        )
    return f"ExecStart={cfg.binary_path} start --home {cfg.home}"


def generate_systemd_unit(cfg: SystemdConfig) -> str:
    """Render the unit file text for ``cfg``."""
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
        f"{_exec_lines(cfg)}\n"
        f"Restart={cfg.restart}\n"
        f"RestartSec={cfg.restart_sec}\n"
        "LimitNOFILE=65535\n"
        "\n"
        "# Security hardening\n"
        "NoNewPrivileges=true\n"
        "PrivateTmp=true\n"
        "ProtectSystem=strict\n"
        "ProtectHome=read-only\n"
        f"ReadWritePaths={cfg.home}\n"
        "\n"
        "[Install]\n"
        "WantedBy=multi-user.target\n"
    )


def write_systemd_unit(cfg: SystemdConfig, dry_run: bool) -> tuple[str, str]:
    """Write the unit file and return its path and content.

    With ``dry_run`` nothing is written.
    """
    content = generate_systemd_unit(cfg)
    unit_path = str(PurePosixPath(SYSTEMD_DIR) / f"monod-{cfg.network}.service")

    if dry_run:
        return unit_path, content

    if not os.path.exists(SYSTEMD_DIR):
        raise FileNotFoundError(
            f"systemd not available: {SYSTEMD_DIR} does not exist"
        )

    try:
        with open(unit_path, "w", encoding="utf-8") as handle:
            handle.write(content)
        os.chmod(unit_path, 0o644)
    except OSError as exc:
        raise OSError(f"failed to write unit file (do you need sudo?): {exc}") from exc

    return unit_path, content


def systemd_instructions(unit_path: str) -> str:
    """Return manual steps for enabling the unit written to ``unit_path``."""
    name = PurePosixPath(unit_path).name
    return (
        "\n"
        f"Systemd unit file written to: {unit_path}\n"
        "\n"
        "To enable and start the service:\n"
        "  sudo systemctl daemon-reload\n"
        f"  sudo systemctl enable {name}\n"
        f"  sudo systemctl start {name}\n"
        "\n"
        "To check status:\n"
        f"  sudo systemctl status {name}\n"
        "\n"
        "To view logs:\n"
        f"  sudo journalctl -u {name} -f\n"
    )