"""Typed configuration for cmd-keeper-installer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

DEFAULT_RELEASE_VERSION = "0.1.0"

DEFAULT_URL_TEMPLATE = (
    "https://github.com/taro33333/cmd-keeper/releases/download/"
    "v{version}/cmd-keeper-{suffix}"
)

DEFAULT_TARGET_NAME = "cmd-keeper"

# Marker used by the published release formula before real digests exist.
PLACEHOLDER_CHECKSUM = "REPLACE_WITH_ACTUAL_SHA256"

DEFAULT_DOWNLOAD_TIMEOUT = 60.0


def _default_checksums() -> Dict[str, str]:
    return {
        "darwin-arm64": PLACEHOLDER_CHECKSUM,
        "darwin-amd64": PLACEHOLDER_CHECKSUM,
        "linux-amd64": PLACEHOLDER_CHECKSUM,
    }


@dataclass
class ReleaseConfig:
    """The release to install and its per-platform digests.

    A new release needs new checksum entries; the table is versioned together
    with `version`.
    """

    version: str = DEFAULT_RELEASE_VERSION
    url_template: str = DEFAULT_URL_TEMPLATE
    target_name: str = DEFAULT_TARGET_NAME
    checksums: Dict[str, str] = field(default_factory=_default_checksums)


@dataclass
class InstallConfig:
    """Where the binary is placed."""

    root: Optional[str] = None


@dataclass
class DownloadConfig:
    """Download settings."""

    timeout: float = DEFAULT_DOWNLOAD_TIMEOUT


@dataclass
class InstallerConfig:
    """Complete cmd-keeper-installer configuration."""

    release: ReleaseConfig = field(default_factory=ReleaseConfig)
    install: InstallConfig = field(default_factory=InstallConfig)
    download: DownloadConfig = field(default_factory=DownloadConfig)

    # Where the values came from (global:..., custom:..., cli), for debugging
    _config_sources: List[str] = field(default_factory=list, repr=False)
