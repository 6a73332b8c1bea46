"""Tests for platform → artifact resolution."""

from __future__ import annotations

import pytest

from cmd_keeper_installer.bootstrap.platform import HostPlatform
from cmd_keeper_installer.config.models import PLACEHOLDER_CHECKSUM, ReleaseConfig
from cmd_keeper_installer.core.models import ReleaseVersion
from cmd_keeper_installer.errors import ConfigError, UnsupportedPlatformError
from cmd_keeper_installer.resolver import (
    PLATFORM_SUFFIXES,
    build_url,
    expected_checksum,
    is_valid_sha256,
    platform_suffix,
    resolve_artifact,
    supported_platforms,
)

VERSION = ReleaseVersion("0.1.0")


class TestPlatformSuffix:
    """Tests for the resolution table."""

    @pytest.mark.parametrize(
        "os_name, arch, suffix",
        [
            ("macos", "arm64", "darwin-arm64"),
            ("macos", "amd64", "darwin-amd64"),
            ("linux", "amd64", "linux-amd64"),
        ],
    )
    def test_supported(self, os_name: str, arch: str, suffix: str) -> None:
        assert platform_suffix(HostPlatform(os=os_name, arch=arch)) == suffix

    @pytest.mark.parametrize(
        "os_name, arch",
        [
            ("linux", "arm64"),
            ("windows", "amd64"),
            ("freebsd", "amd64"),
            ("macos", "riscv64"),
        ],
    )
    def test_unsupported(self, os_name: str, arch: str) -> None:
        with pytest.raises(UnsupportedPlatformError) as exc_info:
            platform_suffix(HostPlatform(os=os_name, arch=arch))

        assert exc_info.value.os == os_name
        assert exc_info.value.arch == arch

    def test_supported_platforms_matches_table(self) -> None:
        assert supported_platforms() == list(PLATFORM_SUFFIXES)


class TestExpectedChecksum:
    """Tests for checksum lookup (fail closed)."""

    def test_returns_lowercase(self) -> None:
        release = ReleaseConfig(checksums={"linux-amd64": "AB" * 32})
        assert expected_checksum(release, "linux-amd64") == "ab" * 32

    def test_missing_entry(self) -> None:
        release = ReleaseConfig(checksums={})
        with pytest.raises(ConfigError, match="No sha256 checksum"):
            expected_checksum(release, "linux-amd64")

    def test_empty_entry(self) -> None:
        release = ReleaseConfig(checksums={"linux-amd64": "  "})
        with pytest.raises(ConfigError):
            expected_checksum(release, "linux-amd64")

    def test_placeholder_entry(self) -> None:
        release = ReleaseConfig(checksums={"linux-amd64": PLACEHOLDER_CHECKSUM})
        with pytest.raises(ConfigError, match="placeholder"):
            expected_checksum(release, "linux-amd64")

    def test_malformed_entry(self) -> None:
        release = ReleaseConfig(checksums={"linux-amd64": "abc123"})
        with pytest.raises(ConfigError, match="64-character"):
            expected_checksum(release, "linux-amd64")

    def test_default_release_table_fails_closed(self) -> None:
        with pytest.raises(ConfigError):
            expected_checksum(ReleaseConfig(), "darwin-arm64")


class TestBuildUrl:
    """Tests for URL template substitution."""

    def test_substitutes_version_and_suffix(self) -> None:
        url = build_url("https://example.com/v{version}/tool-{suffix}", VERSION, "linux-amd64")
        assert url == "https://example.com/v0.1.0/tool-linux-amd64"

    def test_unknown_placeholder(self) -> None:
        with pytest.raises(ConfigError, match="url_template"):
            build_url("https://example.com/{channel}/{suffix}", VERSION, "linux-amd64")


def test_is_valid_sha256() -> None:
    assert is_valid_sha256("0" * 64)
    assert not is_valid_sha256("0" * 63)
    assert not is_valid_sha256("g" * 64)
    assert not is_valid_sha256("")


class TestResolveArtifact:
    """Tests for resolve_artifact."""

    def test_scenario_macos_arm64(self, release_config: ReleaseConfig) -> None:
        spec = resolve_artifact(HostPlatform(os="macos", arch="arm64"), VERSION, release_config)

        assert spec.url == (
            "https://github.com/taro33333/cmd-keeper/releases/download/"
            "v0.1.0/cmd-keeper-darwin-arm64"
        )
        assert spec.url.endswith("cmd-keeper-darwin-arm64")
        assert spec.suffix == "darwin-arm64"
        assert spec.target_name == "cmd-keeper"

    def test_scenario_linux_arm64_unsupported(self, release_config: ReleaseConfig) -> None:
        with pytest.raises(UnsupportedPlatformError, match="linux-arm64"):
            resolve_artifact(HostPlatform(os="linux", arch="arm64"), VERSION, release_config)

    def test_every_supported_platform_resolves(self, release_config: ReleaseConfig) -> None:
        for host in supported_platforms():
            spec = resolve_artifact(host, VERSION, release_config)
            assert spec.url
            assert is_valid_sha256(spec.expected_hash)
            assert spec.platform == host

    def test_target_name_is_constant_across_variants(
        self, release_config: ReleaseConfig
    ) -> None:
        names = {
            resolve_artifact(host, VERSION, release_config).target_name
            for host in supported_platforms()
        }
        assert names == {"cmd-keeper"}

    def test_unsupported_checked_before_checksums(self) -> None:
        # An unsupported host is reported as such even with a broken table.
        with pytest.raises(UnsupportedPlatformError):
            resolve_artifact(HostPlatform(os="linux", arch="arm64"), VERSION, ReleaseConfig())

    def test_rejects_path_in_target_name(self, release_config: ReleaseConfig) -> None:
        release_config.target_name = "../cmd-keeper"
        with pytest.raises(ConfigError, match="target_name"):
            resolve_artifact(HostPlatform(os="linux", arch="amd64"), VERSION, release_config)

    def test_is_deterministic(self, release_config: ReleaseConfig) -> None:
        host = HostPlatform(os="linux", arch="amd64")
        assert resolve_artifact(host, VERSION, release_config) == resolve_artifact(
            host, VERSION, release_config
        )
