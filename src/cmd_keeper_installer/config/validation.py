"""Configuration validation for cmd-keeper-installer.

Unknown keys are warnings (with a "did you mean" suggestion); wrong types and
values that would make an install impossible or unverifiable are errors.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from difflib import get_close_matches
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

import yaml

from cmd_keeper_installer.config.models import PLACEHOLDER_CHECKSUM
from cmd_keeper_installer.core.logging import get_logger

LOGGER = get_logger(__name__)

_SHA256_PATTERN = re.compile(r"^[0-9a-fA-F]{64}$")


class ValidationSeverity(Enum):
    """Severity level for validation issues."""

    ERROR = "error"  # Config will fail at runtime
    WARNING = "warning"  # Likely mistake but config usable


@dataclass
class ConfigValidationIssue:
    """A validation issue for configuration with severity."""

    message: str
    source: str
    severity: ValidationSeverity
    key: Optional[str] = None
    suggestion: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.severity == ValidationSeverity.ERROR


# Valid top-level keys
VALID_TOP_LEVEL_KEYS: Set[str] = {
    "release",
    "install",
    "download",
}

# Valid keys under release section
VALID_RELEASE_KEYS: Set[str] = {
    "version",
    "url_template",
    "target_name",
    "checksums",
}

# Valid keys under install section
VALID_INSTALL_KEYS: Set[str] = {
    "root",
}

# Valid keys under download section
VALID_DOWNLOAD_KEYS: Set[str] = {
    "timeout",
}

# Placeholders the URL template must contain
REQUIRED_URL_PLACEHOLDERS = ("{version}", "{suffix}")


class _IssueCollector:
    """Accumulates issues for one config source."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.issues: List[ConfigValidationIssue] = []

    def error(self, message: str, key: Optional[str] = None) -> None:
        self.issues.append(ConfigValidationIssue(
            message=message,
            source=self.source,
            severity=ValidationSeverity.ERROR,
            key=key,
        ))

    def unknown_keys(
        self,
        section: Dict[str, Any],
        valid_keys: Set[str],
        prefix: str = "",
    ) -> None:
        for key in section:
            if key in valid_keys:
                continue
            where = f"'{prefix}'" if prefix else "top-level"
            full_key = f"{prefix}.{key}" if prefix else str(key)
            self.issues.append(ConfigValidationIssue(
                message=f"Unknown {where} key '{key}'",
                source=self.source,
                severity=ValidationSeverity.WARNING,
                key=full_key,
                suggestion=_suggest_key(str(key), valid_keys),
            ))


def validate_config(data: Any, source: str) -> List[ConfigValidationIssue]:
    """Validate a configuration dictionary.

    Does not raise; returns the issues found.

    Args:
        data: Config dictionary to validate.
        source: Source file path for messages.

    Returns:
        List of validation issues (errors and warnings).
    """
    issues = _IssueCollector(source)

    if not isinstance(data, dict):
        issues.error(f"Config must be a mapping, got {type(data).__name__}")
        return issues.issues

    issues.unknown_keys(data, VALID_TOP_LEVEL_KEYS)

    release = data.get("release")
    if release is not None:
        if isinstance(release, dict):
            _validate_release(release, issues)
        else:
            issues.error(f"'release' must be a mapping, got {type(release).__name__}", "release")

    install = data.get("install")
    if install is not None:
        if isinstance(install, dict):
            issues.unknown_keys(install, VALID_INSTALL_KEYS, "install")
            root = install.get("root")
            if root is not None and (not isinstance(root, str) or not root.strip()):
                issues.error("'install.root' must be a non-empty string", "install.root")
        else:
            issues.error(f"'install' must be a mapping, got {type(install).__name__}", "install")

    download = data.get("download")
    if download is not None:
        if isinstance(download, dict):
            issues.unknown_keys(download, VALID_DOWNLOAD_KEYS, "download")
            timeout = download.get("timeout")
            if timeout is not None:
                if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
                    issues.error(
                        f"'download.timeout' must be a number, got {type(timeout).__name__}",
                        "download.timeout",
                    )
                elif timeout <= 0:
                    issues.error("'download.timeout' must be positive", "download.timeout")
        else:
            issues.error(f"'download' must be a mapping, got {type(download).__name__}", "download")

    return issues.issues


def _validate_release(release: Dict[str, Any], issues: _IssueCollector) -> None:
    issues.unknown_keys(release, VALID_RELEASE_KEYS, "release")

    version = release.get("version")
    if version is not None:
        # YAML reads 1.0 as a float; accept it, the loader stringifies.
        if isinstance(version, bool) or not isinstance(version, (str, int, float)):
            issues.error(
                f"'release.version' must be a string, got {type(version).__name__}",
                "release.version",
            )
        elif not str(version).strip():
            issues.error("'release.version' must not be empty", "release.version")

    url_template = release.get("url_template")
    if url_template is not None:
        if not isinstance(url_template, str):
            issues.error(
                f"'release.url_template' must be a string, got {type(url_template).__name__}",
                "release.url_template",
            )
        else:
            # ${VAR} references are only expanded at load time
            if not url_template.startswith(("https://", "${")):
                issues.error(
                    "'release.url_template' must be an https:// URL",
                    "release.url_template",
                )
            for placeholder in REQUIRED_URL_PLACEHOLDERS:
                if placeholder not in url_template:
                    issues.error(
                        f"'release.url_template' is missing the {placeholder} placeholder",
                        "release.url_template",
                    )

    target_name = release.get("target_name")
    if target_name is not None:
        if not isinstance(target_name, str) or not target_name.strip():
            issues.error("'release.target_name' must be a non-empty string", "release.target_name")
        elif "/" in target_name or "\\" in target_name:
            issues.error(
                "'release.target_name' must be a file name, not a path",
                "release.target_name",
            )

    checksums = release.get("checksums")
    if checksums is not None:
        if not isinstance(checksums, dict):
            issues.error(
                f"'release.checksums' must be a mapping, got {type(checksums).__name__}",
                "release.checksums",
            )
            return
        for suffix, value in checksums.items():
            key = f"release.checksums.{suffix}"
            if not isinstance(value, str):
                issues.error(f"'{key}' must be a string, got {type(value).__name__}", key)
            elif value == PLACEHOLDER_CHECKSUM:
                issues.issues.append(ConfigValidationIssue(
                    message=f"'{key}' is still a placeholder; installs for {suffix} will fail",
                    source=issues.source,
                    severity=ValidationSeverity.WARNING,
                    key=key,
                ))
            elif not _SHA256_PATTERN.match(value):
                issues.error(f"'{key}' must be a 64-character hex sha256", key)


def _suggest_key(invalid_key: str, valid_keys: Set[str]) -> Optional[str]:
    """Suggest a valid key for a potential typo.

    Returns:
        Closest matching valid key, or None if no good match.
    """
    matches = get_close_matches(invalid_key, list(valid_keys), n=1, cutoff=0.6)
    return matches[0] if matches else None


def log_issue(issue: ConfigValidationIssue) -> None:
    """Log a validation issue."""
    msg = f"{issue.message} in {issue.source}"
    if issue.suggestion:
        msg += f" (did you mean '{issue.suggestion}'?)"
    if issue.is_error:
        LOGGER.error(msg)
    else:
        LOGGER.warning(msg)


def validate_config_file(config_path: Path) -> Tuple[bool, List[ConfigValidationIssue]]:
    """Validate a configuration file from disk.

    Checks file existence, YAML syntax, and configuration semantics.

    Returns:
        Tuple of (is_valid, issues) where is_valid is False if any errors exist.
    """
    source = str(config_path)

    if not config_path.exists():
        return False, [ConfigValidationIssue(
            message=f"Configuration file not found: {config_path}",
            source=source,
            severity=ValidationSeverity.ERROR,
        )]

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return False, [ConfigValidationIssue(
            message=f"Invalid YAML syntax: {e}",
            source=source,
            severity=ValidationSeverity.ERROR,
        )]

    if data is None:
        return True, [ConfigValidationIssue(
            message="Configuration file is empty",
            source=source,
            severity=ValidationSeverity.WARNING,
        )]

    issues = validate_config(data, source)
    has_errors = any(issue.is_error for issue in issues)
    return not has_errors, issues
