"""
Bootstrap module for cmd-keeper binary management.

This module handles:
- Platform detection (OS + architecture)
- Config home and install root resolution
- HTTPS downloads with certifi-backed TLS
- Validation of the installed binary
"""

from cmd_keeper_installer.bootstrap.platform import detect_host_platform, HostPlatform
from cmd_keeper_installer.bootstrap.paths import (
    get_cmd_keeper_home,
    resolve_install_root,
    InstallerPaths,
)
from cmd_keeper_installer.bootstrap.validation import (
    inspect_installation,
    run_version_check,
    ToolStatus,
)

__all__ = [
    "detect_host_platform",
    "HostPlatform",
    "get_cmd_keeper_home",
    "resolve_install_root",
    "InstallerPaths",
    "inspect_installation",
    "run_version_check",
    "ToolStatus",
]
