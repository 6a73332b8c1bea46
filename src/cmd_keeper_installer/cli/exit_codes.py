"""Exit codes for the cmd-keeper-installer CLI.

Failures that come from an InstallerError exit with that error's own code,
so each failing stage is distinguishable from the shell.
"""

from __future__ import annotations

from cmd_keeper_installer.errors import (
    ConfigError,
    FetchError,
    InstallError,
    IntegrityError,
    UnsupportedPlatformError,
)

EXIT_SUCCESS = 0
EXIT_ISSUES_FOUND = 1
EXIT_INVALID_USAGE = ConfigError.exit_code
EXIT_UNSUPPORTED_PLATFORM = UnsupportedPlatformError.exit_code
EXIT_FETCH_FAILURE = FetchError.exit_code
EXIT_INTEGRITY_FAILURE = IntegrityError.exit_code
EXIT_INSTALL_FAILURE = InstallError.exit_code
EXIT_INTERRUPTED = 130
