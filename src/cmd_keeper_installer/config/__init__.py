"""Configuration loading for cmd-keeper-installer."""

from cmd_keeper_installer.config.loader import get_default_config, load_config
from cmd_keeper_installer.config.models import InstallerConfig, ReleaseConfig

__all__ = [
    "get_default_config",
    "load_config",
    "InstallerConfig",
    "ReleaseConfig",
]
