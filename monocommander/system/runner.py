"""Running external commands with dry-run support and output redaction."""

from __future__ import annotations

import re
import shutil
import subprocess
import time
from dataclasses import dataclass, field
from typing import Pattern, Sequence

REDACTED = "[REDACTED]"
DRY_RUN_OUTPUT = "(dry-run: command not executed)"
DEFAULT_TIMEOUT = 60.0
KEY_CHECK_TIMEOUT = 10.0
RAW_LOG_LIMIT = 500


def _default_patterns() -> list[Pattern[str]]:
    return [
        # Mnemonics (12 or 24 words)
        re.compile(r"(?i)(mnemonic|seed)[:\s]+[a-z\s]{30,}"),
        # Hex private keys
        re.compile(r"(?i)(private[_\s]?key|priv[_\s]?key)[:\s]*[a-fA-F0-9]{64}"),
        # Base64 encoded keys
        re.compile(r"(?i)(key|secret)[:\s]*[A-Za-z0-9+/]{40,}={0,2}"),
        # Keyring passwords
        re.compile(r"(?i)password[:\s]+\S+"),
    ]


def _default_env_vars() -> list[str]:
    return ["MONOD_KEYRING_PASSWORD", "MONO_MNEMONIC"]


@dataclass
class CommandResult:
    """Outcome of running (or pretending to run) a command."""

    command: str = ""
    exit_code: int = 0
    stdout: str = ""
    stderr: str = ""
    success: bool = False
    duration: float = 0.0
    error: BaseException | None = None


@dataclass
class TxSummary:
    """Minimal facts pulled out of transaction output."""

    tx_hash: str = ""
    height: int = 0
    code: int = 0
    success: bool = False
    raw_log: str = ""


def _decode(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, str):
        return data
    return data.decode("utf-8", errors="replace")


@dataclass
class Runner:
    """Executes commands, redacting secrets from what it reports."""

    dry_run: bool = True
    timeout: float = DEFAULT_TIMEOUT
    redact_patterns: list[Pattern[str]] = field(default_factory=_default_patterns)
    redact_env_vars: list[str] = field(default_factory=_default_env_vars)
    work_dir: str = ""

    def redact(self, text: str) -> str:
        """Replace every match of the redaction patterns with a marker."""
        for pattern in self.redact_patterns:
            text = pattern.sub(REDACTED, text)
        return text

    def run(self, binary: str, args: Sequence[str]) -> CommandResult:
        """Run ``binary`` with ``args``; in dry-run mode nothing is executed."""
        args = list(args)
        result = CommandResult(command=self.redact(binary + " " + " ".join(args)))

        if self.dry_run:
            result.success = True
            result.stdout = DRY_RUN_OUTPUT
            return result

        start = time.monotonic()
        try:
            completed = subprocess.run(
                [binary, *args],
                capture_output=True,
                cwd=self.work_dir or None,
                timeout=self.timeout if self.timeout > 0 else None,
            )
        except subprocess.TimeoutExpired as exc:
            result.duration = time.monotonic() - start
            result.stdout = self.redact(_decode(exc.stdout))
            result.stderr = self.redact(_decode(exc.stderr))
            result.error = exc
            result.exit_code = -1
            return result
        except OSError as exc:
            result.duration = time.monotonic() - start
            result.error = exc
            result.exit_code = -1
            return result
        result.duration = time.monotonic() - start

        result.stdout = self.redact(_decode(completed.stdout))
        result.stderr = self.redact(_decode(completed.stderr))

        if completed.returncode == 0:
            result.success = True
        else:
            result.error = subprocess.CalledProcessError(
                completed.returncode, result.command, result.stdout, result.stderr
            )
            # A process killed by a signal has no exit code of its own.
            result.exit_code = completed.returncode if completed.returncode > 0 else -1
        return result

    def run_tx(self, binary: str, args: Sequence[str]) -> CommandResult:
        """Run a transaction command; ``args`` must start with ``tx``."""
        args = list(args)
        if len(args) < 2 or args[0] != "tx":
            raise ValueError("run_tx requires 'tx' as first argument")
        return self.run(binary, args)

    def check_binary_exists(self, binary: str) -> str:
        """Return the resolved path of ``binary`` or raise FileNotFoundError."""
        path = shutil.which(binary)
        if path is None:
            raise FileNotFoundError(
                f"binary not found: {binary} (ensure it's installed and in PATH)"
            )
        return path

    def check_key_exists(self, home: str, key_name: str) -> bool:
        """Report whether ``key_name`` is in the test keyring; runs even in dry-run."""
        checker = Runner(
            dry_run=False,
            timeout=KEY_CHECK_TIMEOUT,
            redact_patterns=[],
            redact_env_vars=[],
        )
        args = ["keys", "show", key_name]
        if home:
            args += ["--home", home]
        args += ["--keyring-backend", "test"]

        result = checker.run("monod", args)
        if result.success:
            return True
        if "not found" in result.stderr or "no such key" in result.stderr:
            return False
        raise RuntimeError(f"failed to check key: {result.stderr}")


def default_runner(dry_run: bool = True) -> Runner:
    """Return a runner with the standard redaction rules and timeout."""
    return Runner(dry_run=dry_run)


_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _field_value(line: str, key: str) -> str | None:
    idx = line.find(key)
    if idx < 0:
        return None
    rest = line[idx:]
    colon = rest.find(":")
    if colon < 0:
        return None
    value = rest[colon + 1 :]
    if value.startswith(" "):
        value = value[1:]
    return value.strip('",')


def extract_tx_summary(output: str) -> TxSummary:
    """Pull the hash, height and success flag out of transaction output."""
    summary = TxSummary()

    for raw_line in output.split("\n"):
        line = raw_line.strip()

        if '"txhash"' in line:
            value = _field_value(line, '"txhash"')
            if value is not None:
                summary.tx_hash = value

        if '"code":0' in line or '"code": 0' in line:
            summary.success = True
            summary.code = 0

        if '"height"' in line:
            value = _field_value(line, '"height"')
            if value is not None:
                match = _LEADING_INT.match(value)
                if match:
                    summary.height = int(match.group(1))

    if len(output) > RAW_LOG_LIMIT:
        summary.raw_log = output[:RAW_LOG_LIMIT] + "...[truncated]"
    else:
        summary.raw_log = output
    return summary