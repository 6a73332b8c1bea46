"""CLI commands package.

This module provides the base Command class and exports all command implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from argparse import Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cmd_keeper_installer.config.models import InstallerConfig


class Command(ABC):
    """Base class for CLI commands.

    All CLI commands should inherit from this class and implement
    the execute method. Commands let InstallerError propagate; the runner
    turns it into a stage message and exit code.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Command identifier."""

    @abstractmethod
    def execute(self, args: Namespace, config: "InstallerConfig | None" = None) -> int:
        """Execute the command.

        Args:
            args: Parsed command-line arguments.
            config: Loaded configuration, for commands that need it.

        Returns:
            Exit code (0 for success, non-zero for error).
        """


# Import command implementations for convenience
# ruff: noqa: E402
from cmd_keeper_installer.cli.commands.install import InstallCommand
from cmd_keeper_installer.cli.commands.resolve import ResolveCommand
from cmd_keeper_installer.cli.commands.status import StatusCommand
from cmd_keeper_installer.cli.commands.validate import ValidateCommand

__all__ = [
    "Command",
    "InstallCommand",
    "ResolveCommand",
    "StatusCommand",
    "ValidateCommand",
]
