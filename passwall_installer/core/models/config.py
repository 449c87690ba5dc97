"""
Installer configuration model — loaded from installer.yml.

Every field defaults to the stock Passwall setup, so the installer
runs with no config file at all. The file only exists to point the
installer at a mirror, a different package set, or a test sandbox.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from passwall_installer.core.models.package import DEFAULT_BUFFER_BYTES

DEFAULT_REPO_URL = "https://master.dl.sourceforge.net/project/openwrt-passwall-build"

DEFAULT_FEEDS = ["passwall_luci", "passwall_packages", "passwall2"]

DEFAULT_PACKAGES = [
    "dnsmasq-full",
    "wget-ssl",
    "unzip",
    "luci-app-passwall2",
    "kmod-nft-socket",
    "kmod-nft-tproxy",
    "ca-bundle",
    "kmod-inet-diag",
    "kernel",
    "kmod-netlink-diag",
    "kmod-tun",
    "ipset",
    "xray-core",
]


class InstallerConfig(BaseModel):
    """Where feeds and packages come from and where they go."""

    repo_url: str = DEFAULT_REPO_URL
    public_key_name: str = "passwall.pub"
    feeds: list[str] = Field(default_factory=lambda: list(DEFAULT_FEEDS))
    packages: list[str] = Field(default_factory=lambda: list(DEFAULT_PACKAGES))

    feed_file: Path = Path("/etc/opkg/customfeeds.conf")
    release_file: Path = Path("/etc/openwrt_release")
    dhcp_config: Path = Path("/etc/config/dhcp")

    buffer_bytes: int = Field(default=DEFAULT_BUFFER_BYTES, ge=0)
    storage_mount: str = "/overlay"
    fallback_mount: str = "/"

    required_commands: list[str] = Field(
        default_factory=lambda: ["wget", "opkg"],
    )

    @field_validator("packages", "feeds")
    @classmethod
    def _non_empty_names(cls, value: list[str]) -> list[str]:
        for name in value:
            if not name or any(c.isspace() for c in name):
                raise ValueError(f"invalid name: {name!r}")
        return value

    @property
    def public_key_url(self) -> str:
        return f"{self.repo_url}/{self.public_key_name}"

    def feed_url(self, release: str, arch: str, feed: str) -> str:
        """Feed URL for one release/arch pair."""
        return f"{self.repo_url}/releases/packages-{release}/{arch}/{feed}"
