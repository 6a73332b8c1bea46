"""Resolve command implementation."""

from __future__ import annotations

from argparse import Namespace
from typing import Optional

from cmd_keeper_installer.bootstrap.platform import HostPlatform
from cmd_keeper_installer.cli.commands import Command
from cmd_keeper_installer.cli.exit_codes import EXIT_SUCCESS
from cmd_keeper_installer.config.models import InstallerConfig
from cmd_keeper_installer.core.models import ReleaseVersion
from cmd_keeper_installer.resolver import resolve_artifact


class ResolveCommand(Command):
    """Shows which artifact would be installed, without downloading it."""

    def __init__(self, host: HostPlatform):
        self._host = host

    @property
    def name(self) -> str:
        """Command identifier."""
        return "resolve"

    def execute(self, args: Namespace, config: Optional[InstallerConfig] = None) -> int:
        config = config or InstallerConfig()
        version = ReleaseVersion.parse(config.release.version)
        spec = resolve_artifact(self._host, version, config.release)

        print(f"Platform: {spec.platform}")
        print(f"Release:  {version}")
        print(f"Asset:    {spec.suffix}")
        print(f"URL:      {spec.url}")
        print(f"sha256:   {spec.expected_hash}")
        print(f"Installs: {spec.target_name}")
        return EXIT_SUCCESS
