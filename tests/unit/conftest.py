"""Shared fixtures for unit tests."""

from __future__ import annotations

import hashlib

import pytest

from cmd_keeper_installer.bootstrap.platform import HostPlatform
from cmd_keeper_installer.config.models import InstallerConfig, ReleaseConfig
from cmd_keeper_installer.core.models import ArtifactSpec

# A tiny stand-in for the released binary: a shell script answering --version
ARTIFACT_BYTES = b"#!/bin/sh\necho 'cmd-keeper 0.1.0'\n"
ARTIFACT_SHA256 = hashlib.sha256(ARTIFACT_BYTES).hexdigest()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep tests away from the real ~/.cmd-keeper and install root."""
    home = tmp_path / "cmd-keeper-home"
    monkeypatch.setenv("CMD_KEEPER_HOME", str(home))
    monkeypatch.delenv("CMD_KEEPER_INSTALL_ROOT", raising=False)
    return home


@pytest.fixture
def artifact_bytes() -> bytes:
    return ARTIFACT_BYTES


@pytest.fixture
def release_config() -> ReleaseConfig:
    """Release table whose checksums all match ARTIFACT_BYTES."""
    return ReleaseConfig(
        version="0.1.0",
        checksums={
            "darwin-arm64": ARTIFACT_SHA256,
            "darwin-amd64": ARTIFACT_SHA256,
            "linux-amd64": ARTIFACT_SHA256,
        },
    )


@pytest.fixture
def installer_config(release_config: ReleaseConfig) -> InstallerConfig:
    return InstallerConfig(release=release_config)


@pytest.fixture
def spec() -> ArtifactSpec:
    return ArtifactSpec(
        url="https://github.com/taro33333/cmd-keeper/releases/download/v0.1.0/cmd-keeper-linux-amd64",
        expected_hash=ARTIFACT_SHA256,
        target_name="cmd-keeper",
        platform=HostPlatform(os="linux", arch="amd64"),
        suffix="linux-amd64",
    )
