"""Error taxonomy for cmd-keeper installation.

Every failure raised by the installer derives from InstallerError and names
the stage it happened in, so the CLI can report "which stage failed and why"
and map each kind to its own exit code. None of these are caught and
recovered from internally.
"""

from __future__ import annotations

from typing import ClassVar, Optional


class InstallerError(Exception):
    """Base class for all installation failures."""

    stage: ClassVar[str] = "install"
    exit_code: ClassVar[int] = 1


class ConfigError(InstallerError):
    """Configuration loading, parsing or release-table error."""

    stage = "config"
    exit_code = 2


class UnsupportedPlatformError(InstallerError):
    """The detected (os, arch) pair has no published artifact."""

    stage = "resolve"
    exit_code = 3

    def __init__(self, os: str, arch: str) -> None:
        self.os = os
        self.arch = arch
        super().__init__(f"Unsupported platform: {os}-{arch}")


class FetchError(InstallerError):
    """Network, transport or HTTP status failure while downloading."""

    stage = "fetch"
    exit_code = 4

    def __init__(self, url: str, reason: str, status: Optional[int] = None) -> None:
        self.url = url
        self.reason = reason
        self.status = status
        detail = f"HTTP {status} - {reason}" if status is not None else reason
        super().__init__(f"Failed to download {url}: {detail}")


class IntegrityError(InstallerError):
    """Downloaded content does not match the expected SHA-256 digest."""

    stage = "verify"
    exit_code = 5

    def __init__(self, url: str, expected: str, actual: str) -> None:
        self.url = url
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Checksum mismatch for {url}: expected sha256 {expected}, got {actual}"
        )


class InstallError(InstallerError):
    """Filesystem failure while writing, renaming or chmod-ing the binary."""

    stage = "install"
    exit_code = 6

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to install {path}: {reason}")


class VerificationCheckError(InstallerError):
    """The installed binary did not answer a version query successfully."""

    stage = "check"
    exit_code = 7

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Post-install check failed for {path}: {reason}")
