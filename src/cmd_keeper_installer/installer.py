"""Installation of a resolved cmd-keeper artifact.

Fetch, verify and install are strictly sequential. The binary only reaches
its final path through an atomic rename of a fully written, verified,
executable temporary file in the same directory, so an observer sees either
the previous binary or the new one and never a partial file.
"""

from __future__ import annotations

import hashlib
import hmac
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from cmd_keeper_installer.bootstrap.download import DEFAULT_TIMEOUT, fetch_artifact
from cmd_keeper_installer.bootstrap.paths import target_path
from cmd_keeper_installer.bootstrap.platform import HostPlatform
from cmd_keeper_installer.config.models import InstallerConfig
from cmd_keeper_installer.core.logging import get_logger
from cmd_keeper_installer.core.models import (
    ArtifactSpec,
    InstallResult,
    InstallState,
    ReleaseVersion,
)
from cmd_keeper_installer.errors import InstallError, IntegrityError
from cmd_keeper_installer.resolver import resolve_artifact

LOGGER = get_logger(__name__)

EXECUTABLE_MODE = 0o755

_TEMP_PREFIX = ".cmd-keeper-install-"
_TEMP_SUFFIX = ".tmp"


def sha256_bytes(data: bytes) -> str:
    """Hex SHA-256 of in-memory content."""
    return hashlib.sha256(data).hexdigest()


def sha256_file(path: Path) -> str:
    """Hex SHA-256 of a file, read in chunks."""
    h = hashlib.sha256()
    with path.open("rb") as fh:
        for chunk in iter(lambda: fh.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()


def digests_match(expected: str, actual: str) -> bool:
    """Compare two hex digests case-insensitively in constant time."""
    return hmac.compare_digest(expected.lower(), actual.lower())


def verify_content(spec: ArtifactSpec, data: bytes) -> str:
    """Check downloaded bytes against the expected digest.

    Returns:
        The actual digest.

    Raises:
        IntegrityError: On mismatch.
    """
    actual = sha256_bytes(data)
    if not digests_match(spec.expected_hash, actual):
        raise IntegrityError(spec.url, spec.expected_hash, actual)
    return actual


def atomic_install(data: bytes, destination: Path, mode: int = EXECUTABLE_MODE) -> Path:
    """Write bytes to destination atomically and mark them executable.

    The content is written to a temporary file next to the destination,
    flushed to disk, chmod-ed and then renamed into place with os.replace.
    Whatever goes wrong (including KeyboardInterrupt), the temporary file is
    removed and the destination is left as it was.

    Raises:
        InstallError: On any filesystem failure.
    """
    install_root = destination.parent
    try:
        install_root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise InstallError(str(destination), f"cannot create {install_root}: {e}") from e

    try:
        fd, tmp_name = tempfile.mkstemp(dir=install_root, prefix=_TEMP_PREFIX, suffix=_TEMP_SUFFIX)
    except OSError as e:
        raise InstallError(str(destination), f"cannot write to {install_root}: {e}") from e

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, destination)
    except BaseException as e:
        tmp_path.unlink(missing_ok=True)
        if isinstance(e, OSError):
            raise InstallError(str(destination), str(e)) from e
        raise

    return destination


@dataclass
class Installer:
    """Turns a resolved ArtifactSpec into an executable on disk.

    Attributes:
        install_root: Directory the binary is placed in.
        timeout: Download timeout in seconds.
        force: Re-download even if an identical binary is already installed.
        state: Current step; FAILED is terminal for this invocation.
    """

    install_root: Path
    timeout: float = DEFAULT_TIMEOUT
    force: bool = False
    state: InstallState = field(default=InstallState.IDLE, init=False)
    failure: Optional[BaseException] = field(default=None, init=False, repr=False)

    def destination(self, spec: ArtifactSpec) -> Path:
        """Final path of the installed binary for a spec."""
        return target_path(self.install_root, spec.target_name)

    def is_current(self, spec: ArtifactSpec) -> bool:
        """Check if the destination already holds exactly the expected artifact."""
        path = self.destination(spec)
        if not path.is_file() or not os.access(path, os.X_OK):
            return False
        try:
            return digests_match(spec.expected_hash, sha256_file(path))
        except OSError as e:
            LOGGER.debug(f"Could not hash existing {path}: {e}")
            return False

    def install(self, spec: ArtifactSpec) -> InstallResult:
        """Fetch, verify and install an artifact.

        Args:
            spec: Resolved artifact.

        Returns:
            InstallResult with the installed path.

        Raises:
            FetchError: If the download fails.
            IntegrityError: If the content digest does not match.
            InstallError: If the binary cannot be written.
        """
        if self.state is not InstallState.IDLE:
            raise RuntimeError(f"Installer already used (state: {self.state.value})")

        destination = self.destination(spec)
        try:
            if not self.force and self.is_current(spec):
                LOGGER.info(f"{destination} is already up to date, skipping download.")
                self.state = InstallState.DONE
                return InstallResult(
                    installed_path=destination,
                    spec=spec,
                    sha256=spec.expected_hash,
                    skipped=True,
                )

            self.state = InstallState.FETCHING
            data = fetch_artifact(spec.url, timeout=self.timeout)

            self.state = InstallState.VERIFYING
            actual = verify_content(spec, data)
            LOGGER.debug(f"sha256 verified: {actual}")

            self.state = InstallState.INSTALLING
            atomic_install(data, destination)
        except BaseException as e:
            self.failure = e
            LOGGER.debug(f"Install failed during {self.state.value}: {e}")
            self.state = InstallState.FAILED
            raise

        self.state = InstallState.DONE
        LOGGER.info(f"Installed {spec.suffix} artifact to {destination}")
        return InstallResult(installed_path=destination, spec=spec, sha256=actual)


def install_artifact(
    spec: ArtifactSpec,
    install_root: Path,
    timeout: float = DEFAULT_TIMEOUT,
    force: bool = False,
) -> InstallResult:
    """Install a resolved artifact with a fresh Installer."""
    return Installer(install_root=install_root, timeout=timeout, force=force).install(spec)


def install_release(
    host: HostPlatform,
    config: InstallerConfig,
    install_root: Path,
    force: bool = False,
) -> InstallResult:
    """Resolve the configured release for a host and install it.

    The resolver runs first; an unsupported host or an unusable release table
    fails before anything is downloaded.
    """
    version = ReleaseVersion.parse(config.release.version)
    spec = resolve_artifact(host, version, config.release)
    LOGGER.info(f"Installing cmd-keeper {version} ({spec.suffix}) into {install_root}")
    return install_artifact(
        spec,
        install_root,
        timeout=config.download.timeout,
        force=force,
    )
