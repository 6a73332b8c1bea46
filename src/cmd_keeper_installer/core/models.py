"""Core data models for artifact resolution and installation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from cmd_keeper_installer.bootstrap.platform import HostPlatform
from cmd_keeper_installer.errors import ConfigError


class InstallState(str, Enum):
    """Lifecycle of a single installation."""

    IDLE = "idle"
    FETCHING = "fetching"
    VERIFYING = "verifying"
    INSTALLING = "installing"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class ReleaseVersion:
    """A published release tag, without the leading "v"."""

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ConfigError("Release version must not be empty")

    @classmethod
    def parse(cls, raw: str) -> "ReleaseVersion":
        """Parse user input, accepting both "0.1.0" and "v0.1.0"."""
        value = raw.strip()
        if value[:1] in ("v", "V") and value[1:2].isdigit():
            value = value[1:]
        return cls(value)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ArtifactSpec:
    """Where to download the binary for one host, and what it must hash to.

    Attributes:
        url: Fully-qualified download location.
        expected_hash: Lowercase hex SHA-256 of the artifact.
        target_name: Name of the installed executable (same for every variant).
        platform: Host the artifact was resolved for.
        suffix: Platform suffix of the release asset (e.g. "darwin-arm64").
    """

    url: str
    expected_hash: str
    target_name: str
    platform: HostPlatform
    suffix: str


@dataclass(frozen=True)
class InstallResult:
    """Outcome of a successful installation."""

    installed_path: Path
    spec: ArtifactSpec
    sha256: str
    skipped: bool = False
