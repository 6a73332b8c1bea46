"""Path management for cmd-keeper-installer.

Handles the configuration home (~/.cmd-keeper) and the install root the
binary is placed in.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Optional

# Default directory name under user home
DEFAULT_HOME_DIR_NAME = ".cmd-keeper"

# Environment variable to override home directory
CMD_KEEPER_HOME_ENV = "CMD_KEEPER_HOME"

# Environment variable to override the install root
INSTALL_ROOT_ENV = "CMD_KEEPER_INSTALL_ROOT"

# Default install root (on PATH for most user shells)
DEFAULT_INSTALL_ROOT = Path("~/.local/bin")


def get_cmd_keeper_home() -> Path:
    """Get the cmd-keeper home directory path.

    Resolution order:
    1. CMD_KEEPER_HOME environment variable (if set)
    2. ~/.cmd-keeper (default)
    """
    env_home = os.environ.get(CMD_KEEPER_HOME_ENV)
    if env_home:
        return Path(env_home).expanduser()
    return Path.home() / DEFAULT_HOME_DIR_NAME


def resolve_install_root(
    cli_root: Optional[str] = None,
    configured_root: Optional[str] = None,
) -> Path:
    """Determine the directory the binary is installed into.

    Resolution order:
    1. --install-root on the command line
    2. CMD_KEEPER_INSTALL_ROOT environment variable
    3. install.root from configuration
    4. ~/.local/bin

    Returns:
        Absolute path with ~ expanded. The directory may not exist yet.
    """
    for candidate in (cli_root, os.environ.get(INSTALL_ROOT_ENV), configured_root):
        if candidate:
            return Path(candidate).expanduser().absolute()
    return DEFAULT_INSTALL_ROOT.expanduser().absolute()


@dataclass
class InstallerPaths:
    """Paths within the cmd-keeper home directory.

    Directory structure:
        ~/.cmd-keeper/
            config.yml    - Global configuration
    """

    home: Path

    _GLOBAL_CONFIG_NAME: ClassVar[str] = "config.yml"

    @classmethod
    def default(cls) -> "InstallerPaths":
        """Create paths from the default cmd-keeper home."""
        return cls(get_cmd_keeper_home())

    @property
    def global_config(self) -> Path:
        """Path to the global configuration file."""
        return self.home / self._GLOBAL_CONFIG_NAME


def target_path(install_root: Path, target_name: str) -> Path:
    """Final location of the installed executable."""
    return install_root / target_name
