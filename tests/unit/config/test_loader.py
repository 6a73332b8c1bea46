"""Tests for configuration loading."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from cmd_keeper_installer.bootstrap.paths import InstallerPaths
from cmd_keeper_installer.config.loader import (
    dict_to_config,
    expand_env_vars,
    get_default_config,
    load_config,
    load_yaml_file,
    merge_configs,
)
from cmd_keeper_installer.config.models import (
    DEFAULT_TARGET_NAME,
    DEFAULT_URL_TEMPLATE,
    PLACEHOLDER_CHECKSUM,
)
from cmd_keeper_installer.errors import ConfigError

SHA_A = "a" * 64
SHA_B = "b" * 64


@pytest.fixture
def paths(tmp_path: Path) -> InstallerPaths:
    home = tmp_path / "home"
    home.mkdir()
    return InstallerPaths(home)


class TestDefaults:
    """Tests for built-in defaults."""

    def test_default_config(self) -> None:
        config = get_default_config()
        assert config.release.version == "0.1.0"
        assert config.release.url_template == DEFAULT_URL_TEMPLATE
        assert config.release.target_name == DEFAULT_TARGET_NAME
        assert config.install.root is None
        assert config.download.timeout == 60.0

    def test_default_checksums_are_placeholders(self) -> None:
        checksums = get_default_config().release.checksums
        assert set(checksums) == {"darwin-arm64", "darwin-amd64", "linux-amd64"}
        assert set(checksums.values()) == {PLACEHOLDER_CHECKSUM}

    def test_load_without_files(self, paths: InstallerPaths) -> None:
        config = load_config(paths=paths)
        assert config.release.version == "0.1.0"
        assert config._config_sources == []


class TestLoadConfig:
    """Tests for layered config loading."""

    def test_global_config(self, paths: InstallerPaths) -> None:
        paths.global_config.write_text(
            f"release:\n  checksums:\n    linux-amd64: {SHA_A}\n"
        )
        config = load_config(paths=paths)

        assert config.release.checksums["linux-amd64"] == SHA_A
        # Entries not mentioned keep their defaults
        assert config.release.checksums["darwin-arm64"] == PLACEHOLDER_CHECKSUM
        assert config._config_sources == [f"global:{paths.global_config}"]

    def test_custom_config_overrides_global(self, paths: InstallerPaths, tmp_path: Path) -> None:
        paths.global_config.write_text(
            f"release:\n  version: '0.1.0'\n  checksums:\n    linux-amd64: {SHA_A}\n"
        )
        custom = tmp_path / "custom.yml"
        custom.write_text(f"release:\n  version: '0.2.0'\n  checksums:\n    linux-amd64: {SHA_B}\n")

        config = load_config(cli_config_path=custom, paths=paths)

        assert config.release.version == "0.2.0"
        assert config.release.checksums["linux-amd64"] == SHA_B

    def test_cli_overrides_win(self, paths: InstallerPaths, tmp_path: Path) -> None:
        custom = tmp_path / "custom.yml"
        custom.write_text("release:\n  version: '0.2.0'\ndownload:\n  timeout: 10\n")

        config = load_config(
            cli_config_path=custom,
            cli_overrides={"release": {"version": "0.3.0"}, "download": {"timeout": 5}},
            paths=paths,
        )

        assert config.release.version == "0.3.0"
        assert config.download.timeout == 5.0
        assert config._config_sources[-1] == "cli"

    def test_missing_custom_config(self, paths: InstallerPaths, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(cli_config_path=tmp_path / "nope.yml", paths=paths)

    def test_invalid_yaml_in_custom_config(self, paths: InstallerPaths, tmp_path: Path) -> None:
        custom = tmp_path / "custom.yml"
        custom.write_text("release: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(cli_config_path=custom, paths=paths)

    def test_invalid_values_in_custom_config(self, paths: InstallerPaths, tmp_path: Path) -> None:
        custom = tmp_path / "custom.yml"
        custom.write_text("download:\n  timeout: -1\n")
        with pytest.raises(ConfigError, match="must be positive"):
            load_config(cli_config_path=custom, paths=paths)

    def test_broken_global_config_is_only_a_warning(
        self, paths: InstallerPaths, caplog
    ) -> None:
        paths.global_config.write_text("release: [unclosed\n")
        with caplog.at_level(logging.WARNING):
            config = load_config(paths=paths)

        assert config.release.version == "0.1.0"
        assert "Failed to load global config" in caplog.text

    def test_unknown_key_is_only_a_warning(
        self, paths: InstallerPaths, tmp_path: Path, caplog
    ) -> None:
        custom = tmp_path / "custom.yml"
        custom.write_text("relase:\n  version: '0.2.0'\n")

        with caplog.at_level(logging.WARNING):
            config = load_config(cli_config_path=custom, paths=paths)

        assert config.release.version == "0.1.0"
        assert "did you mean 'release'" in caplog.text

    def test_install_root_from_config(self, paths: InstallerPaths, tmp_path: Path) -> None:
        custom = tmp_path / "custom.yml"
        custom.write_text("install:\n  root: /opt/tools/bin\n")
        assert load_config(cli_config_path=custom, paths=paths).install.root == "/opt/tools/bin"

    def test_numeric_version_is_stringified(self, paths: InstallerPaths, tmp_path: Path) -> None:
        custom = tmp_path / "custom.yml"
        custom.write_text("release:\n  version: 1.0\n")
        assert load_config(cli_config_path=custom, paths=paths).release.version == "1.0"

    @pytest.mark.parametrize(
        "content",
        [
            "release:\n",
            "install:\n",
            "download:\n",
            "release:\n  checksums:\n",
            "release:\n  version:\n",
            "download:\n  timeout:\n",
        ],
    )
    def test_empty_sections_fall_back_to_defaults(
        self, paths: InstallerPaths, tmp_path: Path, content: str
    ) -> None:
        custom = tmp_path / "custom.yml"
        custom.write_text(content)

        config = load_config(cli_config_path=custom, paths=paths)

        assert config.release.version == "0.1.0"
        assert config.release.target_name == DEFAULT_TARGET_NAME
        assert config.install.root is None
        assert config.download.timeout == 60.0

    def test_empty_section_keeps_global_values(self, paths: InstallerPaths, tmp_path: Path) -> None:
        paths.global_config.write_text("release:\n  version: '0.2.0'\n")
        custom = tmp_path / "custom.yml"
        custom.write_text("release:\n")

        config = load_config(cli_config_path=custom, paths=paths)

        assert config.release.version == "0.2.0"


class TestLoadYamlFile:
    """Tests for load_yaml_file."""

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert load_yaml_file(path) == {}

    def test_non_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_yaml_file(path)

    def test_expands_env_vars(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setenv("CMD_KEEPER_MIRROR", "https://mirror.example.com")
        path = tmp_path / "c.yml"
        path.write_text("release:\n  url_template: '${CMD_KEEPER_MIRROR}/{version}/{suffix}'\n")

        data = load_yaml_file(path)
        assert data["release"]["url_template"] == "https://mirror.example.com/{version}/{suffix}"


class TestExpandEnvVars:
    """Tests for environment variable expansion."""

    def test_default_value(self, monkeypatch) -> None:
        monkeypatch.delenv("CMD_KEEPER_UNSET", raising=False)
        assert expand_env_vars("${CMD_KEEPER_UNSET:-fallback}") == "fallback"

    def test_unset_without_default(self, monkeypatch) -> None:
        monkeypatch.delenv("CMD_KEEPER_UNSET", raising=False)
        assert expand_env_vars("x${CMD_KEEPER_UNSET}y") == "xy"

    def test_nested(self, monkeypatch) -> None:
        monkeypatch.setenv("ROOT", "/opt/bin")
        assert expand_env_vars({"install": {"root": "${ROOT}"}, "n": [1, "${ROOT}"]}) == {
            "install": {"root": "/opt/bin"},
            "n": [1, "/opt/bin"],
        }


class TestMergeConfigs:
    """Tests for merge_configs."""

    def test_deep_merge(self) -> None:
        base = {"release": {"version": "0.1.0", "checksums": {"a": "1"}}}
        overlay = {"release": {"checksums": {"b": "2"}}}
        assert merge_configs(base, overlay) == {
            "release": {"version": "0.1.0", "checksums": {"a": "1", "b": "2"}},
        }

    def test_does_not_mutate_base(self) -> None:
        base = {"download": {"timeout": 60}}
        merge_configs(base, {"download": {"timeout": 5}})
        assert base == {"download": {"timeout": 60}}

    def test_none_overlay_keeps_base(self) -> None:
        base = {"release": {"version": "0.2.0"}}
        assert merge_configs(base, {"release": None}) == base


def test_dict_to_config_adds_new_platform_checksum() -> None:
    config = dict_to_config({"release": {"checksums": {"linux-arm64": SHA_A}}})
    assert config.release.checksums["linux-arm64"] == SHA_A
    assert "linux-amd64" in config.release.checksums


def test_dict_to_config_treats_null_values_as_unset() -> None:
    config = dict_to_config({
        "release": {"version": None, "checksums": None},
        "install": None,
        "download": {"timeout": None},
    })
    assert config.release.version == "0.1.0"
    assert config.release.url_template == DEFAULT_URL_TEMPLATE
    assert config.install.root is None
    assert config.download.timeout == 60.0
