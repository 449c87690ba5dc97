"""
Tests for configuration loading — installer.yml parsing and validation.
"""

import textwrap
from pathlib import Path

import pytest

from passwall_installer.core.config.loader import (
    CONFIG_ENV,
    CONFIG_FILE,
    find_config_file,
    load_config,
)
from passwall_installer.core.errors import ConfigurationError


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV, raising=False)


@pytest.fixture
def valid_installer_yml(tmp_path: Path) -> Path:
    content = textwrap.dedent("""\
        repo_url: https://mirror.example/passwall
        buffer_bytes: 409600
        packages:
          - dnsmasq-full
          - sing-box
        storage_mount: /mnt/data
    """)
    path = tmp_path / CONFIG_FILE
    path.write_text(content)
    return path


class TestFindConfigFile:
    def test_in_start_dir(self, valid_installer_yml: Path):
        assert find_config_file(valid_installer_yml.parent) == valid_installer_yml

    def test_not_found(self, tmp_path: Path):
        assert find_config_file(tmp_path) is None

    def test_env_var_wins(self, tmp_path: Path, valid_installer_yml: Path, monkeypatch):
        other = tmp_path / "router.yml"
        monkeypatch.setenv(CONFIG_ENV, str(other))
        assert find_config_file(valid_installer_yml.parent) == other


class TestLoadConfig:
    def test_explicit_file(self, valid_installer_yml: Path):
        config = load_config(valid_installer_yml)
        assert config.repo_url == "https://mirror.example/passwall"
        assert config.buffer_bytes == 409600
        assert config.packages == ["dnsmasq-full", "sing-box"]
        assert config.storage_mount == "/mnt/data"
        # untouched settings keep their defaults
        assert config.fallback_mount == "/"

    def test_defaults_without_file(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = load_config()
        assert config.buffer_bytes == 204800
        assert config.packages[0] == "dnsmasq-full"

    def test_from_env_var(self, valid_installer_yml: Path, monkeypatch):
        monkeypatch.setenv(CONFIG_ENV, str(valid_installer_yml))
        assert load_config().buffer_bytes == 409600

    def test_installer_section(self, tmp_path: Path):
        path = tmp_path / "router.yml"
        path.write_text("installer:\n  feeds: [passwall2]\n")
        assert load_config(path).feeds == ["passwall2"]

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / CONFIG_FILE
        path.write_text("")
        assert load_config(path).feeds == ["passwall_luci", "passwall_packages", "passwall2"]

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / CONFIG_FILE
        path.write_text("packages: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / CONFIG_FILE
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(path)

    def test_schema_error(self, tmp_path: Path):
        path = tmp_path / CONFIG_FILE
        path.write_text("buffer_bytes: lots\n")
        with pytest.raises(ConfigurationError, match="Invalid installer configuration"):
            load_config(path)
