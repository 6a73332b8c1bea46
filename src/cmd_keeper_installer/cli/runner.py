"""CLI runner orchestration.

This module handles command dispatch and execution for the
cmd-keeper-installer CLI.
"""

from __future__ import annotations

from argparse import Namespace
from typing import Iterable, Optional

from importlib.metadata import version, PackageNotFoundError

from cmd_keeper_installer.bootstrap.platform import HostPlatform, detect_host_platform
from cmd_keeper_installer.cli.arguments import build_parser
from cmd_keeper_installer.cli.config_bridge import ConfigBridge
from cmd_keeper_installer.cli.exit_codes import EXIT_INTERRUPTED, EXIT_SUCCESS
from cmd_keeper_installer.cli.commands.install import InstallCommand
from cmd_keeper_installer.cli.commands.resolve import ResolveCommand
from cmd_keeper_installer.cli.commands.status import StatusCommand
from cmd_keeper_installer.cli.commands.validate import ValidateCommand
from cmd_keeper_installer.config import load_config
from cmd_keeper_installer.core.logging import configure_logging, get_logger
from cmd_keeper_installer.errors import InstallerError

LOGGER = get_logger(__name__)


def get_version() -> str:
    """Get cmd-keeper-installer version.

    Returns:
        Version string from package metadata or fallback.
    """
    try:
        return version("cmd-keeper-installer")
    except PackageNotFoundError:
        # Fallback for editable installs that have not yet built metadata.
        from cmd_keeper_installer import __version__
        return __version__


class CLIRunner:
    """Orchestrates CLI execution with subcommand dispatch."""

    def __init__(self, host: Optional[HostPlatform] = None) -> None:
        """Initialize CLIRunner.

        Args:
            host: Host platform; detected from the environment when omitted.
        """
        self.parser = build_parser()
        self._version = get_version()
        self._host = host
        self.validate_cmd = ValidateCommand()

    @property
    def host(self) -> HostPlatform:
        """Host platform, detected once per run."""
        if self._host is None:
            self._host = detect_host_platform()
            LOGGER.debug(f"Detected platform {self._host}")
        return self._host

    def run(self, argv: Optional[Iterable[str]] = None) -> int:
        """Run the CLI.

        Args:
            argv: Command-line arguments (defaults to sys.argv).

        Returns:
            Exit code.
        """
        # Handle --help specially to return 0
        if argv is not None:
            argv_list = list(argv)
            if argv_list in (["--help"], ["-h"]):
                self.parser.print_help()
                return EXIT_SUCCESS
        else:
            argv_list = None

        args = self.parser.parse_args(argv_list)

        # Configure logging as early as possible
        configure_logging(
            debug=args.debug,
            verbose=args.verbose,
            quiet=args.quiet,
        )

        if args.version:
            print(self._version)
            return EXIT_SUCCESS

        command = getattr(args, "command", None)

        try:
            if command == "install":
                return self._handle_install(args)
            elif command == "resolve":
                return self._handle_resolve(args)
            elif command == "status":
                return self._handle_status(args)
            elif command == "validate":
                return self.validate_cmd.execute(args)
        except InstallerError as e:
            LOGGER.error(f"{e.stage} failed: {e}")
            return e.exit_code
        except KeyboardInterrupt:
            LOGGER.error("Interrupted")
            return EXIT_INTERRUPTED

        # No command specified - show help
        self.parser.print_help()
        return EXIT_SUCCESS

    def _load_config(self, args: Namespace):
        return load_config(
            cli_config_path=getattr(args, "config", None),
            cli_overrides=ConfigBridge.args_to_overrides(args),
        )

    def _handle_install(self, args: Namespace) -> int:
        """Handle the install command."""
        config = self._load_config(args)
        return InstallCommand(host=self.host).execute(args, config)

    def _handle_resolve(self, args: Namespace) -> int:
        """Handle the resolve command."""
        config = self._load_config(args)
        return ResolveCommand(host=self.host).execute(args, config)

    def _handle_status(self, args: Namespace) -> int:
        """Handle the status command."""
        config = self._load_config(args)
        return StatusCommand(version=self._version, host=self.host).execute(args, config)
