"""
Tests for domain models — prompt specs, menu options, receipts, config.
"""

import pytest
from pydantic import ValidationError

from passwall_installer.core.errors import ConfigurationError, ExternalToolError
from passwall_installer.core.models import (
    InstallerConfig,
    MenuOption,
    PackageQuery,
    PromptSpec,
    Receipt,
)


class TestPromptSpec:
    def test_valid_default(self):
        spec = PromptSpec(prompt="Port", default="8080", kind="port")
        assert spec.default == "8080"

    def test_invalid_default_rejected(self):
        with pytest.raises(ConfigurationError, match="fails 'port'"):
            PromptSpec(prompt="Port", default="0", kind="port")

    def test_unknown_kind_rejected(self):
        with pytest.raises(ConfigurationError):
            PromptSpec(prompt="Mail", kind="email")

    def test_bad_args_rejected_without_default(self):
        with pytest.raises(ConfigurationError, match="'range' min"):
            PromptSpec(prompt="Temp", kind="range", args=("a", "50"))
        with pytest.raises(ConfigurationError, match="exactly 2"):
            PromptSpec(prompt="Temp", kind="range", args=("a",))

    def test_any_accepts_any_default(self):
        assert PromptSpec(prompt="Tag", default="whatever").kind == "any"

    def test_range_args(self):
        spec = PromptSpec(prompt="Temp", default="20", kind="range", args=("-40", "50"))
        assert spec.args == ("-40", "50")


class TestMenuOption:
    def test_plain_token(self):
        opt = MenuOption.parse("1", "First")
        assert (opt.token, opt.value, opt.description) == ("1", "1", "First")

    def test_mapped_token(self):
        opt = MenuOption.parse("ABC:CBD", "Variant ABC")
        assert (opt.token, opt.value) == ("ABC", "CBD")

    def test_splits_on_first_colon(self):
        opt = MenuOption.parse("a:b:c")
        assert (opt.token, opt.value) == ("a", "b:c")

    def test_empty_mapping(self):
        assert MenuOption.parse("x:").value == ""


class TestPackageQuery:
    def test_found(self):
        assert PackageQuery(name="a", candidate_version="1").found
        assert not PackageQuery(name="a").found


class TestReceipt:
    def test_success(self):
        r = Receipt.success(adapter="opkg", command="opkg update", output="done")
        assert r.ok and not r.failed
        assert r.raise_for_status() is r

    def test_failure_raises(self):
        r = Receipt.failure(
            adapter="opkg", command="opkg install foo", error="no space", return_code=255,
        )
        with pytest.raises(ExternalToolError) as exc:
            r.raise_for_status()
        assert exc.value.command == "opkg install foo"
        assert exc.value.returncode == 255
        assert "no space" in str(exc.value)

    def test_only_ok_or_failed(self):
        with pytest.raises(ValidationError):
            Receipt(adapter="opkg", command="opkg remove x", status="skipped")


class TestInstallerConfig:
    def test_defaults(self):
        config = InstallerConfig()
        assert str(config.feed_file) == "/etc/opkg/customfeeds.conf"
        assert config.buffer_bytes == 204800
        assert config.feeds == ["passwall_luci", "passwall_packages", "passwall2"]
        assert config.packages[0] == "dnsmasq-full"
        assert "xray-core" in config.packages

    def test_urls(self):
        config = InstallerConfig(repo_url="https://mirror.example/pw")
        assert config.public_key_url == "https://mirror.example/pw/passwall.pub"
        assert config.feed_url("23.05", "x86_64", "passwall2") == (
            "https://mirror.example/pw/releases/packages-23.05/x86_64/passwall2"
        )

    def test_rejects_bad_package_names(self):
        with pytest.raises(ValidationError):
            InstallerConfig(packages=["ok", "two words"])

    def test_rejects_negative_buffer(self):
        with pytest.raises(ValidationError):
            InstallerConfig(buffer_bytes=-1)
