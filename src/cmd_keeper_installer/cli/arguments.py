"""Argument parser construction for cmd-keeper-installer CLI.

This module builds the argument parser with subcommands:
- cmd-keeper-installer install  - Download, verify and install cmd-keeper
- cmd-keeper-installer resolve  - Show the artifact selected for this host
- cmd-keeper-installer status   - Show platform and installation status
- cmd-keeper-installer validate - Validate a configuration file
"""

from __future__ import annotations

import argparse
from pathlib import Path


def _add_global_options(parser: argparse.ArgumentParser) -> None:
    """Add global options available to all commands."""
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show cmd-keeper-installer version and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (info-level) logging.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Reduce logging output to errors only.",
    )


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        metavar="PATH",
        type=Path,
        help="Path to config file (default: ~/.cmd-keeper/config.yml).",
    )


def _add_release_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--release",
        metavar="VERSION",
        help="Release to install, e.g. 0.1.0 (default: from config).",
    )


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"not a number: {value}") from e
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return number


def _build_install_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'install' subcommand parser."""
    install_parser = subparsers.add_parser(
        "install",
        help="Download, verify and install cmd-keeper.",
        description=(
            "Resolve the cmd-keeper artifact for this host, verify its sha256 "
            "and atomically install it into the install root."
        ),
    )
    install_parser.add_argument(
        "--install-root",
        metavar="DIR",
        help=(
            "Directory to install into (default: $CMD_KEEPER_INSTALL_ROOT, "
            "install.root from config, or ~/.local/bin)."
        ),
    )
    _add_release_option(install_parser)
    install_parser.add_argument(
        "--timeout",
        metavar="SECONDS",
        type=_positive_float,
        default=None,
        help="Download timeout in seconds (default: 60).",
    )
    install_parser.add_argument(
        "--force", "-f",
        action="store_true",
        help="Download and reinstall even if the installed binary is up to date.",
    )
    install_parser.add_argument(
        "--check",
        action="store_true",
        help="Run 'cmd-keeper --version' after installing.",
    )
    _add_config_option(install_parser)


def _build_resolve_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'resolve' subcommand parser."""
    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Show the artifact selected for this host.",
        description="Print the download URL and expected sha256 without downloading.",
    )
    _add_release_option(resolve_parser)
    _add_config_option(resolve_parser)


def _build_status_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'status' subcommand parser."""
    status_parser = subparsers.add_parser(
        "status",
        help="Show platform and installation status.",
        description=(
            "Display installer version, platform info, supported platforms "
            "and the state of the installed cmd-keeper binary."
        ),
    )
    status_parser.add_argument(
        "--install-root",
        metavar="DIR",
        help="Directory to inspect (default: as for 'install').",
    )
    _add_config_option(status_parser)


def _build_validate_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'validate' subcommand parser."""
    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate a configuration file.",
        description="Check a cmd-keeper-installer config file for errors and typos.",
    )
    _add_config_option(validate_parser)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser for cmd-keeper-installer CLI.

    Returns:
        Configured ArgumentParser instance with subcommands.
    """
    parser = argparse.ArgumentParser(
        prog="cmd-keeper-installer",
        description="Install the pre-built cmd-keeper binary for this machine.",
        epilog=(
            "Examples:\n"
            "  cmd-keeper-installer install                      # Install into ~/.local/bin\n"
            "  cmd-keeper-installer install --install-root /usr/local/bin\n"
            "  cmd-keeper-installer install --force --check      # Reinstall and smoke test\n"
            "  cmd-keeper-installer resolve                      # Show URL and sha256\n"
            "  cmd-keeper-installer status                       # Show install status\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    _add_global_options(parser)

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="Available commands:",
        metavar="COMMAND",
    )

    _build_install_parser(subparsers)
    _build_resolve_parser(subparsers)
    _build_status_parser(subparsers)
    _build_validate_parser(subparsers)

    return parser
