"""Platform resolution: which release asset belongs to this host.

Adding a platform is a new entry in PLATFORM_SUFFIXES plus a checksum in the
release table; there is no per-platform control flow.
"""

from __future__ import annotations

import re
from typing import Dict, List

from cmd_keeper_installer.bootstrap.platform import HostPlatform
from cmd_keeper_installer.config.models import PLACEHOLDER_CHECKSUM, ReleaseConfig
from cmd_keeper_installer.core.logging import get_logger
from cmd_keeper_installer.core.models import ArtifactSpec, ReleaseVersion
from cmd_keeper_installer.errors import ConfigError, UnsupportedPlatformError

LOGGER = get_logger(__name__)

# Release asset suffix per supported host. No emulated fallbacks (an arm64
# linux host does not get the amd64 build).
PLATFORM_SUFFIXES: Dict[HostPlatform, str] = {
    HostPlatform(os="macos", arch="arm64"): "darwin-arm64",
    HostPlatform(os="macos", arch="amd64"): "darwin-amd64",
    HostPlatform(os="linux", arch="amd64"): "linux-amd64",
}

SHA256_PATTERN = re.compile(r"^[0-9a-fA-F]{64}$")


def supported_platforms() -> List[HostPlatform]:
    """Return the hosts that have a published artifact."""
    return list(PLATFORM_SUFFIXES)


def platform_suffix(host: HostPlatform) -> str:
    """Return the release asset suffix for a host.

    Raises:
        UnsupportedPlatformError: If the host has no entry.
    """
    suffix = PLATFORM_SUFFIXES.get(host)
    if suffix is None:
        raise UnsupportedPlatformError(host.os, host.arch)
    return suffix


def is_valid_sha256(value: str) -> bool:
    """Check that a string is a 64-character hex digest."""
    return bool(SHA256_PATTERN.match(value or ""))


def expected_checksum(release: ReleaseConfig, suffix: str) -> str:
    """Look up the expected digest for a release asset.

    Missing, placeholder or malformed entries are configuration errors: an
    artifact without a usable digest is never installed.

    Returns:
        Lowercase hex digest.

    Raises:
        ConfigError: If the entry is unusable.
    """
    value = (release.checksums.get(suffix) or "").strip()
    if not value:
        raise ConfigError(
            f"No sha256 checksum configured for {suffix} in release {release.version}"
        )
    if value == PLACEHOLDER_CHECKSUM:
        raise ConfigError(
            f"Checksum for {suffix} in release {release.version} is still the "
            f"placeholder {PLACEHOLDER_CHECKSUM!r}; set release.checksums.{suffix}"
        )
    if not is_valid_sha256(value):
        raise ConfigError(
            f"Checksum for {suffix} is not a 64-character hex sha256: {value!r}"
        )
    return value.lower()


def build_url(url_template: str, version: ReleaseVersion, suffix: str) -> str:
    """Substitute version and suffix into the release URL template."""
    try:
        url = url_template.format(version=version.value, suffix=suffix)
    except (KeyError, IndexError, ValueError) as e:
        raise ConfigError(f"Invalid release url_template {url_template!r}: {e}") from e
    if not url:
        raise ConfigError("Release url_template produced an empty URL")
    return url


def resolve_artifact(
    host: HostPlatform,
    version: ReleaseVersion,
    release: ReleaseConfig,
) -> ArtifactSpec:
    """Resolve the artifact to install for a host and release.

    Args:
        host: Detected host platform.
        version: Release to install.
        release: Release table (URL template, checksums, target name).

    Returns:
        ArtifactSpec for this host.

    Raises:
        UnsupportedPlatformError: If the host has no published artifact.
        ConfigError: If the release table has no usable digest or URL for it.
    """
    suffix = platform_suffix(host)
    expected = expected_checksum(release, suffix)
    url = build_url(release.url_template, version, suffix)

    target_name = release.target_name
    if not target_name or "/" in target_name or "\\" in target_name:
        raise ConfigError(f"Invalid target_name: {target_name!r}")

    LOGGER.debug(f"Resolved {host} to {url}")
    return ArtifactSpec(
        url=url,
        expected_hash=expected,
        target_name=target_name,
        platform=host,
        suffix=suffix,
    )
