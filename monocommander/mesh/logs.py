"""Reading the Mesh/Rosetta sidecar's logs from the systemd journal."""

from __future__ import annotations

import shutil
import subprocess
import sys
from dataclasses import dataclass
from typing import Iterator

from monocommander.mesh.systemd import unit_name

DEFAULT_LINES = 50


@dataclass
class LogsOptions:
    """What to read from the journal."""

    network: str
    follow: bool = False
    lines: int = 0


def _chomp(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def _require_linux(action: str) -> None:
    if not sys.platform.startswith("linux"):
        raise RuntimeError(f"{action} is only supported on Linux with systemd")


class LogsSource:
    """A running journalctl process whose output is read line by line."""

    def __init__(self, process: subprocess.Popen) -> None:
        self.process = process

    def lines(self) -> Iterator[str]:
        """Yield log lines; the process is stopped when iteration ends."""
        try:
            stream = self.process.stdout
            if stream is None:
                return
            for raw in stream:
                text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
                yield _chomp(text)
        finally:
            self.close()

    def close(self) -> None:
        """Stop the journalctl process."""
        if self.process.poll() is None:
            self.process.kill()
        self.process.wait()
        if self.process.stdout is not None:
            self.process.stdout.close()

    def __enter__(self) -> LogsSource:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _journalctl_args(opts: LogsOptions) -> list[str]:
    count = opts.lines if opts.lines > 0 else DEFAULT_LINES
    args = ["journalctl", "-u", unit_name(opts.network), "-n", str(count)]
    if opts.follow:
        args.append("-f")
    args.append("--no-pager")
    return args


def get_log_source(opts: LogsOptions) -> LogsSource:
    """Start journalctl for the sidecar unit and return a source of its lines."""
    _require_linux("log tailing")
    if shutil.which("journalctl") is None:
        raise FileNotFoundError("journalctl not available")
    try:
        process = subprocess.Popen(_journalctl_args(opts), stdout=subprocess.PIPE)
    except OSError as exc:
        raise RuntimeError(f"failed to start journalctl: {exc}") from exc
    return LogsSource(process)


def get_recent_logs(network: str, lines: int) -> list[str]:
    """Return the last ``lines`` journal lines of the sidecar unit."""
    _require_linux("log retrieval")
    args = ["journalctl", "-u", unit_name(network), "-n", str(lines), "--no-pager"]
    try:
        completed = subprocess.run(args, capture_output=True)
    except OSError as exc:
        raise RuntimeError(f"failed to get logs: {exc}") from exc
    if completed.returncode != 0:
        raise RuntimeError(f"failed to get logs: exit status {completed.returncode}")

    text = (completed.stdout or b"").decode("utf-8", errors="replace")
    if not text:
        return []
    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    return [_chomp(part) for part in parts]