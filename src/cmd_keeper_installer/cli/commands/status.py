"""Status command implementation."""

from __future__ import annotations

from argparse import Namespace
from typing import Optional

from cmd_keeper_installer.bootstrap.paths import (
    get_cmd_keeper_home,
    resolve_install_root,
    target_path,
)
from cmd_keeper_installer.bootstrap.platform import HostPlatform
from cmd_keeper_installer.bootstrap.validation import ToolStatus, inspect_installation
from cmd_keeper_installer.cli.commands import Command
from cmd_keeper_installer.cli.exit_codes import EXIT_SUCCESS
from cmd_keeper_installer.config.models import InstallerConfig
from cmd_keeper_installer.core.models import ReleaseVersion
from cmd_keeper_installer.errors import ConfigError, UnsupportedPlatformError
from cmd_keeper_installer.resolver import resolve_artifact, supported_platforms


class StatusCommand(Command):
    """Shows platform information and the state of the installed binary."""

    def __init__(self, version: str, host: HostPlatform):
        """Initialize StatusCommand.

        Args:
            version: Current cmd-keeper-installer version string.
            host: Host platform detected at startup.
        """
        self._version = version
        self._host = host

    @property
    def name(self) -> str:
        """Command identifier."""
        return "status"

    def execute(self, args: Namespace, config: Optional[InstallerConfig] = None) -> int:
        """Execute the status command.

        Reports problems (unsupported host, placeholder checksums) as part of
        the status instead of failing.

        Returns:
            Exit code (always 0 for status).
        """
        config = config or InstallerConfig()
        install_root = resolve_install_root(
            getattr(args, "install_root", None),
            config.install.root,
        )
        supported = ", ".join(str(p) for p in supported_platforms())

        print(f"cmd-keeper-installer version: {self._version}")
        print(f"Platform: {self._host}")
        print(f"Supported platforms: {supported}")
        print(f"Config home: {get_cmd_keeper_home()}")
        print(f"Install root: {install_root}")
        print(f"Release: {config.release.version}")
        print()

        expected_hash: Optional[str] = None
        try:
            spec = resolve_artifact(
                self._host,
                ReleaseVersion.parse(config.release.version),
                config.release,
            )
            expected_hash = spec.expected_hash
            print(f"Artifact: {spec.url}")
        except UnsupportedPlatformError as e:
            if self._host.is_known():
                print(f"Artifact: none ({e}; no build is published for it)")
            else:
                print(f"Artifact: none ({e}; platform not recognized)")
        except ConfigError as e:
            print(f"Artifact: unavailable ({e})")

        path = target_path(install_root, config.release.target_name)
        result = inspect_installation(path, expected_hash)

        if result.status == ToolStatus.PRESENT:
            status_str = "installed"
        elif result.status == ToolStatus.MISSING:
            status_str = "not installed"
        else:
            status_str = "present but not executable"

        if result.checksum_matches is True:
            status_str += ", matches release checksum"
        elif result.checksum_matches is False:
            status_str += ", differs from release checksum (run 'install --force')"

        print(f"{config.release.target_name}: {status_str} [{path}]")
        return EXIT_SUCCESS
