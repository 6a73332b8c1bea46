"""Platform detection for cmd-keeper artifacts.

Detects OS and architecture once per run. Detection itself never rejects a
host: unknown identifiers are passed through lowercased so the resolver can
report exactly what it saw when no artifact exists for it.
"""

from __future__ import annotations

import platform
from dataclasses import dataclass
from typing import Optional

# Known operating systems, normalized
KNOWN_OS = frozenset({"macos", "linux", "windows"})

# Known architectures, normalized
KNOWN_ARCH = frozenset({"amd64", "arm64"})

_OS_MAP = {
    "darwin": "macos",
    "macos": "macos",
    "linux": "linux",
    "windows": "windows",
}

# Architecture normalization map
_ARCH_MAP = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "x64": "amd64",
    "arm64": "arm64",
    "aarch64": "arm64",
}


def normalize_os(system: str) -> Optional[str]:
    """Normalize an OS identifier (as returned by platform.system()).

    Returns:
        Normalized OS name or None if unknown.
    """
    return _OS_MAP.get(system.lower())


def normalize_arch(machine: str) -> Optional[str]:
    """Normalize architecture string to standard form.

    Args:
        machine: Raw architecture string from platform.machine()

    Returns:
        Normalized architecture string or None if unknown.
    """
    return _ARCH_MAP.get(machine.lower())


def detect_os() -> str:
    """Detect the current operating system.

    Returns:
        macos, linux or windows; the lowercased raw name for anything else.
    """
    system = platform.system()
    return normalize_os(system) or system.lower()


def detect_arch() -> str:
    """Detect the current CPU architecture.

    Returns:
        amd64 or arm64; the lowercased raw machine string for anything else.
    """
    machine = platform.machine()
    return normalize_arch(machine) or machine.lower()


@dataclass(frozen=True)
class HostPlatform:
    """The host an artifact is being installed for.

    Attributes:
        os: Operating system (macos, linux, windows, ...).
        arch: CPU architecture (amd64, arm64, ...).
    """

    os: str
    arch: str

    def __str__(self) -> str:
        return f"{self.os}-{self.arch}"

    def is_known(self) -> bool:
        """Check if both identifiers normalized to a known value."""
        return self.os in KNOWN_OS and self.arch in KNOWN_ARCH


def detect_host_platform() -> HostPlatform:
    """Detect and return the current host platform."""
    return HostPlatform(os=detect_os(), arch=detect_arch())
