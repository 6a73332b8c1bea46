"""Install command implementation."""

from __future__ import annotations

from argparse import Namespace
from typing import Optional

from cmd_keeper_installer.bootstrap.paths import resolve_install_root
from cmd_keeper_installer.bootstrap.platform import HostPlatform
from cmd_keeper_installer.bootstrap.validation import run_version_check
from cmd_keeper_installer.cli.commands import Command
from cmd_keeper_installer.cli.exit_codes import EXIT_SUCCESS
from cmd_keeper_installer.config.models import InstallerConfig
from cmd_keeper_installer.core.logging import get_logger
from cmd_keeper_installer.installer import install_release

LOGGER = get_logger(__name__)


class InstallCommand(Command):
    """Downloads, verifies and installs cmd-keeper for the detected host."""

    def __init__(self, host: HostPlatform):
        """Initialize InstallCommand.

        Args:
            host: Host platform detected at startup.
        """
        self._host = host

    @property
    def name(self) -> str:
        """Command identifier."""
        return "install"

    def execute(self, args: Namespace, config: Optional[InstallerConfig] = None) -> int:
        """Execute the install command.

        Prints the installed path on success. Failures propagate as
        InstallerError subclasses.

        Returns:
            Exit code.
        """
        config = config or InstallerConfig()
        install_root = resolve_install_root(
            getattr(args, "install_root", None),
            config.install.root,
        )

        result = install_release(
            self._host,
            config,
            install_root,
            force=getattr(args, "force", False),
        )

        if result.skipped:
            LOGGER.info(f"cmd-keeper {config.release.version} already installed")

        if getattr(args, "check", False):
            output = run_version_check(result.installed_path)
            print(f"{result.installed_path.name}: {output}")

        print(result.installed_path)
        return EXIT_SUCCESS
