"""Bridge between CLI arguments and configuration."""

from __future__ import annotations

import argparse
from typing import Any, Dict


class ConfigBridge:
    """Translates CLI arguments to configuration overrides."""

    @staticmethod
    def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
        """Convert CLI arguments to a config override dict.

        Only options that were given on the command line are included, so
        config file values survive otherwise. The install root is not an
        override: it is resolved separately because the environment variable
        sits between the flag and the config file.

        Args:
            args: Parsed CLI arguments.

        Returns:
            Dictionary of config overrides.
        """
        overrides: Dict[str, Any] = {}

        release = getattr(args, "release", None)
        if release:
            overrides["release"] = {"version": release}

        timeout = getattr(args, "timeout", None)
        if timeout is not None:
            overrides["download"] = {"timeout": timeout}

        return overrides
