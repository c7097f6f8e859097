"""Downloading and installing the Mesh/Rosetta sidecar binary."""

from __future__ import annotations

import contextlib
import hashlib
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from enum import Enum

import requests

from monocommander.mesh.config import binary_install_path

DOWNLOAD_TIMEOUT = 300.0
_CHUNK_SIZE = 64 * 1024


class StepStatus(str, Enum):
    """State of one installation step."""

    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"

    def __str__(self) -> str:
        return self.value


@dataclass
class InstallStep:
    """One step of the installation and how it went."""

    name: str
    status: StepStatus = StepStatus.PENDING
    message: str = ""


@dataclass
class InstallOptions:
    """What to install and how."""

    url: str = ""
    sha256: str = ""
    version: str = ""
    use_system_path: bool = False
    insecure: bool = False
    dry_run: bool = False


@dataclass
class InstallResult:
    """Report of an installation, step by step."""

    success: bool = False
    install_path: str = ""
    version: str = ""
    sha256: str = ""
    downloaded: bool = False
    error: Exception | None = None
    steps: list[InstallStep] = field(default_factory=list)


class _DownloadError(Exception):
    pass


def _begin(result: InstallResult, name: str) -> InstallStep:
    step = InstallStep(name=name)
    result.steps.append(step)
    return step


def _fail(result: InstallResult, step: InstallStep, message: str, error: Exception) -> InstallResult:
    step.status = StepStatus.FAILED
    step.message = message
    result.error = error
    return result


def _download_to_temp(url: str) -> str:
    try:
        resp = requests.get(url, timeout=DOWNLOAD_TIMEOUT, stream=True)
    except requests.RequestException as exc:
        raise _DownloadError(f"failed to download: {exc}") from exc

    with resp:
        if resp.status_code != requests.codes.ok:
            raise _DownloadError(f"download failed with status {resp.status_code}")
        try:
            handle = tempfile.NamedTemporaryFile(prefix="mono-mesh-rosetta-", delete=False)
        except OSError as exc:
            raise _DownloadError(f"failed to create temp file: {exc}") from exc

        failure: Exception | None = None
        with handle:
            try:
                for chunk in resp.iter_content(_CHUNK_SIZE):
                    handle.write(chunk)
            except (OSError, requests.RequestException) as exc:
                failure = exc
        if failure is not None:
            with contextlib.suppress(OSError):
                os.remove(handle.name)
            raise _DownloadError(f"failed to write temp file: {failure}") from failure
        return handle.name


def compute_sha256(path: str) -> str:
    """Return the hex SHA-256 digest of the file at ``path``."""
    try:
        handle = open(path, "rb")
    except OSError as exc:
        raise OSError(f"failed to open file: {exc}") from exc
    digest = hashlib.sha256()
    with handle:
        try:
            for chunk in iter(lambda: handle.read(_CHUNK_SIZE), b""):
                digest.update(chunk)
        except OSError as exc:
            raise OSError(f"failed to compute hash: {exc}") from exc
    return digest.hexdigest()


def copy_file(src: str, dst: str) -> None:
    """Copy the contents of ``src`` to ``dst``, replacing it."""
    shutil.copyfile(src, dst)


def _dry_run(opts: InstallOptions, result: InstallResult, step: InstallStep) -> InstallResult:
    step.status = StepStatus.SUCCESS
    step.message = f"Would install to: {result.install_path}"
    result.steps.append(
        InstallStep(
            name="Download binary",
            status=StepStatus.SKIPPED,
            message=f"Would download from: {opts.url}",
        )
    )
    if opts.sha256:
        result.steps.append(
            InstallStep(
                name="Verify checksum",
                status=StepStatus.SKIPPED,
                message=f"Would verify SHA256: {opts.sha256}",
            )
        )
    result.steps.append(
        InstallStep(
            name="Install binary",
            status=StepStatus.SKIPPED,
            message=f"Would make executable: {result.install_path}",
        )
    )
    result.success = True
    return result


def _install_downloaded(
    tmp_file: str, opts: InstallOptions, result: InstallResult
) -> InstallResult:
    if opts.sha256:
        step = _begin(result, "Verify checksum")
        try:
            actual = compute_sha256(tmp_file)
        except OSError as exc:
            return _fail(result, step, str(exc), exc)
        if actual != opts.sha256:
            return _fail(
                result,
                step,
                f"expected {opts.sha256}, got {actual}",
                ValueError(f"checksum mismatch: expected {opts.sha256}, got {actual}"),
            )
        result.sha256 = actual
        step.status = StepStatus.SUCCESS
        step.message = "Checksum verified"
    else:
        result.steps.append(
            InstallStep(
                name="Verify checksum",
                status=StepStatus.SKIPPED,
                message="Insecure mode - skipping verification",
            )
        )

    step = _begin(result, "Install binary")
    try:
        copy_file(tmp_file, result.install_path)
    except OSError as exc:
        return _fail(result, step, str(exc), OSError(f"failed to install binary: {exc}"))
    try:
        os.chmod(result.install_path, 0o755)
    except OSError as exc:
        return _fail(
            result, step, str(exc), OSError(f"failed to make binary executable: {exc}")
        )

    step.status = StepStatus.SUCCESS
    step.message = f"Installed to: {result.install_path}"
    result.success = True
    return result


def install(opts: InstallOptions) -> InstallResult:
    """Download, verify and install the sidecar binary.

    Failures are reported through ``error`` and the failed step of the result.
    """
    result = InstallResult()

    step = _begin(result, "Validate options")
    if not opts.url:
        return _fail(
            result,
            step,
            "No download URL provided",
            ValueError(
                "no download URL provided. Please specify --url or configure "
                "a default download source"
            ),
        )
    if not opts.sha256 and not opts.insecure:
        return _fail(
            result,
            step,
            "Checksum required",
            ValueError(
                "SHA256 checksum required for security. Use --sha256 <hash> "
                "or --insecure to skip (not recommended)"
            ),
        )
    step.status = StepStatus.SUCCESS

    step = _begin(result, "Determine install path")
    result.install_path = binary_install_path(opts.use_system_path)
    result.version = opts.version

    if opts.dry_run:
        return _dry_run(opts, result, step)

    step.status = StepStatus.SUCCESS
    step.message = result.install_path

    step = _begin(result, "Create install directory")
    try:
        os.makedirs(os.path.dirname(result.install_path), 0o755, exist_ok=True)
    except OSError as exc:
        return _fail(
            result, step, str(exc), OSError(f"failed to create install directory: {exc}")
        )
    step.status = StepStatus.SUCCESS

    step = _begin(result, "Download binary")
    try:
        tmp_file = _download_to_temp(opts.url)
    except _DownloadError as exc:
        return _fail(result, step, str(exc), exc)

    try:
        result.downloaded = True
        step.status = StepStatus.SUCCESS
        step.message = "Downloaded to temp file"
        return _install_downloaded(tmp_file, opts, result)
    finally:
        with contextlib.suppress(OSError):
            os.remove(tmp_file)


def uninstall(use_system_path: bool, dry_run: bool) -> None:
    """Remove the installed binary; a missing binary is not an error."""
    path = binary_install_path(use_system_path)
    if dry_run:
        return
    if not os.path.exists(path):
        return
    os.remove(path)


def get_installed_version(use_system_path: bool) -> str:
    """Return the installed binary's version, or raise if it is not installed."""
    path = binary_install_path(use_system_path)
    if not os.path.exists(path):
        raise FileNotFoundError(f"binary not installed at {path}")
    return "installed"