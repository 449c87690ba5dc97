"""
Feed setup — release detection and the custom feeds file.
"""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass
from pathlib import Path

from passwall_installer.core.errors import DependencyError
from passwall_installer.core.models.config import InstallerConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Feed:
    """One ``src/gz`` line in the opkg feeds file."""

    name: str
    url: str

    @property
    def line(self) -> str:
        return f"src/gz {self.name} {self.url}"


def parse_release_file(text: str) -> dict[str, str]:
    """Parse ``KEY='value'`` lines from /etc/openwrt_release."""
    values: dict[str, str] = {}
    for raw in text.splitlines():
        raw = raw.strip()
        if not raw or raw.startswith("#") or "=" not in raw:
            continue
        key, _, value = raw.partition("=")
        try:
            parts = shlex.split(value)
        except ValueError:
            parts = [value.strip("'\"")]
        values[key.strip()] = parts[0] if parts else ""
    return values


def is_snapshot(text: str) -> bool:
    return "SNAPSHOT" in text


def release_and_arch(text: str) -> tuple[str, str]:
    """Feed release (patch level dropped: ``23.05.3`` → ``23.05``) and arch.

    Raises:
        DependencyError: If either value is missing.
    """
    info = parse_release_file(text)
    release = info.get("DISTRIB_RELEASE", "")
    if "." in release:
        release = release.rsplit(".", 1)[0]
    arch = info.get("DISTRIB_ARCH", "")
    if not release or not arch:
        raise DependencyError("Failed to determine OpenWrt release or architecture")
    return release, arch


def build_feeds(config: InstallerConfig, release: str, arch: str) -> list[Feed]:
    return [Feed(name, config.feed_url(release, arch, name)) for name in config.feeds]


def append_feeds(feed_file: Path, feeds: list[Feed]) -> list[Feed]:
    """Append feeds whose URL is not already in ``feed_file``.

    Creates the file if needed. Returns the feeds actually added.
    """
    if not feed_file.exists():
        logger.debug("Creating feed file: %s", feed_file)
        feed_file.parent.mkdir(parents=True, exist_ok=True)
        feed_file.touch()

    existing = feed_file.read_text(encoding="utf-8")
    added: list[Feed] = []
    lines: list[str] = []
    for feed in feeds:
        if feed.url in existing:
            logger.warning("Feed '%s' already exists in %s", feed.name, feed_file)
            continue
        logger.info("Adding feed '%s' to %s", feed.name, feed_file)
        lines.append(feed.line)
        added.append(feed)

    if lines:
        prefix = "" if not existing or existing.endswith("\n") else "\n"
        with feed_file.open("a", encoding="utf-8") as fh:
            fh.write(prefix + "\n".join(lines) + "\n")
    return added
