"""Validation of the installed cmd-keeper binary.

Checks that the binary is present and executable, and optionally runs the
post-install smoke test (`cmd-keeper --version`).
"""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from cmd_keeper_installer.core.logging import get_logger
from cmd_keeper_installer.errors import VerificationCheckError

LOGGER = get_logger(__name__)

VERSION_CHECK_TIMEOUT = 30.0


class ToolStatus(str, Enum):
    """Status of a tool binary."""

    PRESENT = "present"
    MISSING = "missing"
    NOT_EXECUTABLE = "not_executable"


@dataclass
class BinaryValidationResult:
    """Result of inspecting an installed binary.

    Attributes:
        path: Where the binary was looked for.
        status: Presence/executability.
        checksum_matches: Whether the content matches the configured digest,
            or None if that could not be determined.
    """

    path: Path
    status: ToolStatus
    checksum_matches: Optional[bool] = None


def validate_binary(path: Path) -> ToolStatus:
    """Validate a single binary.

    Args:
        path: Path to the binary.

    Returns:
        ToolStatus indicating whether the binary is present and executable.
    """
    if not path.is_file():
        return ToolStatus.MISSING

    if not os.access(path, os.X_OK):
        return ToolStatus.NOT_EXECUTABLE

    return ToolStatus.PRESENT


def inspect_installation(path: Path, expected_hash: Optional[str] = None) -> BinaryValidationResult:
    """Inspect an installed binary, comparing its digest when one is known.

    Args:
        path: Installed binary location.
        expected_hash: Configured sha256 for this host, if usable.
    """
    from cmd_keeper_installer.installer import digests_match, sha256_file

    status = validate_binary(path)
    checksum_matches: Optional[bool] = None
    if status != ToolStatus.MISSING and expected_hash:
        try:
            checksum_matches = digests_match(expected_hash, sha256_file(path))
        except OSError as e:
            LOGGER.debug(f"Could not hash {path}: {e}")

    if status != ToolStatus.PRESENT:
        LOGGER.debug(f"cmd-keeper: {status.value} at {path}")

    return BinaryValidationResult(path=path, status=status, checksum_matches=checksum_matches)


def run_version_check(path: Path, timeout: float = VERSION_CHECK_TIMEOUT) -> str:
    """Invoke `<binary> --version` and return its output.

    Raises:
        VerificationCheckError: If the binary cannot be run, times out or
            exits non-zero.
    """
    LOGGER.debug(f"Running {path} --version")
    try:
        result = subprocess.run(
            [str(path), "--version"],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise VerificationCheckError(str(path), f"timed out after {timeout:g}s") from e
    except OSError as e:
        raise VerificationCheckError(str(path), str(e)) from e

    if result.returncode != 0:
        detail = (result.stderr or result.stdout).strip()
        reason = f"exit status {result.returncode}"
        if detail:
            reason = f"{reason}: {detail}"
        raise VerificationCheckError(str(path), reason)

    output = result.stdout.strip()
    LOGGER.info(f"{path.name} reports: {output}")
    return output
