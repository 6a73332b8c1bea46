"""Validate command implementation.

Checks an installer config file for errors and typos, then reports which
supported platforms the resulting release table can actually install.
"""

from __future__ import annotations

from argparse import Namespace
from pathlib import Path
from typing import List, Optional

from cmd_keeper_installer.bootstrap.paths import InstallerPaths
from cmd_keeper_installer.cli.commands import Command
from cmd_keeper_installer.cli.exit_codes import EXIT_ISSUES_FOUND, EXIT_INVALID_USAGE, EXIT_SUCCESS
from cmd_keeper_installer.config.loader import dict_to_config, load_yaml_file
from cmd_keeper_installer.config.models import InstallerConfig
from cmd_keeper_installer.config.validation import (
    ConfigValidationIssue,
    ValidationSeverity,
    validate_config_file,
)
from cmd_keeper_installer.errors import ConfigError
from cmd_keeper_installer.resolver import expected_checksum, platform_suffix, supported_platforms


class ValidateCommand(Command):
    """Validates cmd-keeper-installer configuration files."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "validate"

    def execute(self, args: Namespace, config: Optional[InstallerConfig] = None) -> int:
        """Execute the validate command.

        Args:
            args: Parsed command-line arguments.
            config: Unused; the file named by --config is read directly.

        Returns:
            Exit code: 0 = valid, 1 = has errors, 2 = file not found.
        """
        config_path = getattr(args, "config", None)
        if config_path:
            config_path = Path(config_path)
        else:
            config_path = InstallerPaths.default().global_config

        if not config_path.exists():
            print(f"Configuration file not found: {config_path}")
            return EXIT_INVALID_USAGE

        print(f"Validating {config_path}...")
        is_valid, issues = validate_config_file(config_path)

        # Group by severity
        errors = [i for i in issues if i.severity == ValidationSeverity.ERROR]
        warnings = [i for i in issues if i.severity == ValidationSeverity.WARNING]

        self._print_group("Errors", errors)
        self._print_group("Warnings", warnings)

        if not is_valid:
            print(f"\nConfiguration is invalid ({len(errors)} error(s)).")
            return EXIT_ISSUES_FOUND

        if warnings:
            print(f"\nConfiguration is valid with {len(warnings)} warning(s).")
        else:
            print("Configuration is valid.")

        self._print_platforms(dict_to_config(load_yaml_file(config_path)))
        return EXIT_SUCCESS

    def _print_group(self, title: str, issues: List[ConfigValidationIssue]) -> None:
        if not issues:
            return
        print(f"\n{title} ({len(issues)}):")
        for issue in issues:
            location = f" [{issue.key}]" if issue.key else ""
            print(f"  - {issue.message}{location}")
            if issue.suggestion:
                print(f"    Did you mean '{issue.suggestion}'?")

    def _print_platforms(self, config: InstallerConfig) -> None:
        """Show, per supported host, whether this file alone allows an install.

        The file is judged on its own merged with the built-in defaults; a
        global config is not taken into account.
        """
        print(f"\nRelease {config.release.version}:")
        for host in supported_platforms():
            suffix = platform_suffix(host)
            try:
                expected_checksum(config.release, suffix)
                state = "ready"
            except ConfigError:
                state = "no usable sha256 (install will refuse)"
            print(f"  {host} ({suffix}): {state}")
