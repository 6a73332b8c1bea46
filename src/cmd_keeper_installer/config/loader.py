"""Configuration file loading and merging.

Handles loading configuration from YAML files with:
- Global config (~/.cmd-keeper/config.yml)
- Custom config (--config)
- Environment variable expansion (${VAR})
- Config merging with proper precedence
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from cmd_keeper_installer.bootstrap.paths import InstallerPaths
from cmd_keeper_installer.config.models import (
    DEFAULT_DOWNLOAD_TIMEOUT,
    DEFAULT_RELEASE_VERSION,
    DEFAULT_TARGET_NAME,
    DEFAULT_URL_TEMPLATE,
    DownloadConfig,
    InstallConfig,
    InstallerConfig,
    ReleaseConfig,
)
from cmd_keeper_installer.config.validation import log_issue, validate_config
from cmd_keeper_installer.core.logging import get_logger
from cmd_keeper_installer.errors import ConfigError

LOGGER = get_logger(__name__)

# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


def load_config(
    cli_config_path: Optional[Path] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
    paths: Optional[InstallerPaths] = None,
) -> InstallerConfig:
    """Load configuration with proper precedence.

    Precedence (highest to lowest):
    1. CLI flags (cli_overrides)
    2. Custom config file (cli_config_path)
    3. Global config (~/.cmd-keeper/config.yml)
    4. Built-in defaults

    Args:
        cli_config_path: Optional path to custom config file (--config flag).
        cli_overrides: Dict of CLI flag overrides.
        paths: Installer paths (defaults to the cmd-keeper home).

    Returns:
        Merged InstallerConfig instance.

    Raises:
        ConfigError: If the custom config file is missing or invalid, or if
            the merged result is invalid.
    """
    sources: List[str] = []
    merged: Dict[str, Any] = {}
    paths = paths or InstallerPaths.default()

    # Layer 1: Global config
    global_path = paths.global_config
    if global_path.exists():
        try:
            global_dict = _load_validated(global_path)
            merged = merge_configs(merged, global_dict)
            sources.append(f"global:{global_path}")
            LOGGER.debug(f"Loaded global config from {global_path}")
        except (ConfigError, OSError) as e:
            LOGGER.warning(f"Failed to load global config: {e}")

    # Layer 2: Custom config
    if cli_config_path:
        if not cli_config_path.exists():
            raise ConfigError(f"Config file not found: {cli_config_path}")
        try:
            custom_dict = _load_validated(cli_config_path)
        except OSError as e:
            raise ConfigError(f"Cannot read {cli_config_path}: {e}") from e
        merged = merge_configs(merged, custom_dict)
        sources.append(f"custom:{cli_config_path}")
        LOGGER.debug(f"Loaded custom config from {cli_config_path}")

    # Layer 3: CLI overrides
    if cli_overrides:
        _raise_on_errors(validate_config(cli_overrides, source="command line"))
        merged = merge_configs(merged, cli_overrides)
        sources.append("cli")
        LOGGER.debug("Applied CLI overrides")

    config = dict_to_config(merged)
    config._config_sources = sources

    LOGGER.debug(f"Config loaded from sources: {sources}")
    return config


def _load_validated(path: Path) -> Dict[str, Any]:
    """Load a YAML file and validate it, raising ConfigError on errors."""
    try:
        data = load_yaml_file(path)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    _raise_on_errors(validate_config(data, source=str(path)))
    return data


def _raise_on_errors(issues: List[Any]) -> None:
    for issue in issues:
        log_issue(issue)
    errors = [issue for issue in issues if issue.is_error]
    if errors:
        details = "; ".join(issue.message for issue in errors)
        raise ConfigError(f"Invalid configuration in {errors[0].source}: {details}")


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML config file.

    Performs environment variable expansion on string values.

    Raises:
        yaml.YAMLError: If YAML parsing fails.
        ConfigError: If the document is not a mapping.
    """
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()

    data = yaml.safe_load(content)

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(data).__name__}")

    return expand_env_vars(data)


def expand_env_vars(data: Any) -> Any:
    """Recursively expand environment variables in config values.

    Supports ${VAR} and ${VAR:-default} syntax.
    """
    if isinstance(data, dict):
        return {k: expand_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        return ENV_VAR_PATTERN.sub(_env_var_replacer, data)
    else:
        return data


def _env_var_replacer(match: re.Match[str]) -> str:
    """Replace environment variable reference with its value."""
    var_name = match.group(1)
    default_value = match.group(2)

    value = os.environ.get(var_name)
    if value is not None:
        return value
    if default_value is not None:
        return default_value

    LOGGER.warning(f"Environment variable ${var_name} is not set and has no default")
    return ""


def merge_configs(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two config dicts, with overlay taking precedence.

    Rules:
    - Scalar values: overlay replaces base
    - Lists: overlay replaces base (no merging)
    - Dicts: recursive merge
    - None (an empty YAML key): ignored, base is kept
    """
    result = base.copy()

    for key, overlay_value in overlay.items():
        if overlay_value is None:
            continue
        if key in result and isinstance(result[key], dict) and isinstance(overlay_value, dict):
            result[key] = merge_configs(result[key], overlay_value)
        else:
            result[key] = overlay_value

    return result


def _get(data: Dict[str, Any], key: str, default: Any) -> Any:
    """Return data[key], treating a missing key and an empty YAML value alike."""
    value = data.get(key)
    return default if value is None else value


def dict_to_config(data: Dict[str, Any]) -> InstallerConfig:
    """Convert validated dict to typed InstallerConfig."""
    release_data = _get(data, "release", {})
    release = ReleaseConfig(
        version=str(_get(release_data, "version", DEFAULT_RELEASE_VERSION)),
        url_template=_get(release_data, "url_template", DEFAULT_URL_TEMPLATE),
        target_name=_get(release_data, "target_name", DEFAULT_TARGET_NAME),
    )
    # Configured checksums extend (and override) the built-in entries
    release.checksums.update(
        {
            str(k): v
            for k, v in _get(release_data, "checksums", {}).items()
            if v is not None
        }
    )

    install_data = _get(data, "install", {})
    install = InstallConfig(root=install_data.get("root"))

    download_data = _get(data, "download", {})
    download = DownloadConfig(
        timeout=float(_get(download_data, "timeout", DEFAULT_DOWNLOAD_TIMEOUT)),
    )

    return InstallerConfig(release=release, install=install, download=download)


def get_default_config() -> InstallerConfig:
    """Get the built-in configuration."""
    return InstallerConfig()
