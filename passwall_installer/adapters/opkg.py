"""
opkg adapter — package state queries and install actions.

Queries return parsed values; actions raise ``ExternalToolError`` when
opkg fails, since nothing after a failed install is safe to run.
"""

from __future__ import annotations

import logging
from pathlib import Path

from passwall_installer.adapters.shell.command import CommandRunner
from passwall_installer.core.models.action import Receipt
from passwall_installer.core.models.package import PackageQuery

logger = logging.getLogger(__name__)


def parse_list_installed(output: str, name: str) -> str | None:
    """Version of ``name`` from ``opkg list-installed`` output (``pkg - version``)."""
    for line in output.splitlines():
        parts = line.split()
        if len(parts) >= 3 and parts[0] == name and parts[1] == "-":
            return parts[2]
    return None


def parse_info(output: str) -> tuple[str | None, int]:
    """First ``Version:`` and ``Size:`` values from ``opkg info`` output.

    opkg prints one stanza per feed that carries the package; the first
    one is the candidate. A missing size counts as 0.
    """
    version: str | None = None
    size: int | None = None
    for line in output.splitlines():
        key, _, value = line.partition(":")
        value = value.strip()
        if key == "Version" and version is None and value:
            version = value.split()[0]
        elif key == "Size" and size is None and value:
            try:
                size = int(value.split()[0])
            except ValueError:
                logger.warning("Unparseable size %r in opkg info", value)
                size = 0
    return version, size or 0


class OpkgAdapter:
    """Thin wrapper over the ``opkg`` CLI."""

    def __init__(self, runner: CommandRunner | None = None, binary: str = "opkg"):
        self._runner = runner or CommandRunner(adapter="opkg")
        self._binary = binary

    def _run(self, *args: str, **kwargs) -> Receipt:
        return self._runner.run([self._binary, *args], **kwargs)

    # ── Queries ─────────────────────────────────────────────────

    def installed_version(self, name: str) -> str | None:
        receipt = self._run("list-installed", name).raise_for_status()
        return parse_list_installed(receipt.output, name)

    def is_installed(self, name: str) -> bool:
        return self.installed_version(name) is not None

    def candidate(self, name: str) -> tuple[str | None, int]:
        receipt = self._run("info", name).raise_for_status()
        return parse_info(receipt.output)

    def query(self, name: str) -> PackageQuery:
        """Installed and candidate state for one package. Not cached."""
        installed = self.installed_version(name)
        version, size = self.candidate(name)
        logger.debug(
            "query %s: installed=%s candidate=%s size=%d",
            name, installed, version, size,
        )
        return PackageQuery(
            name=name,
            installed_version=installed,
            candidate_version=version,
            candidate_size=size,
        )

    # ── Actions ─────────────────────────────────────────────────

    def update(self) -> Receipt:
        return self._run("update", stream=True).raise_for_status()

    def install(self, name: str, cache_dir: Path | None = None) -> Receipt:
        args = ["install", name]
        if cache_dir is not None:
            args += ["--cache", str(cache_dir)]
        return self._run(*args, stream=True).raise_for_status()

    def remove(self, name: str) -> Receipt:
        return self._run("remove", name, stream=True).raise_for_status()

    def download(self, name: str, dest_dir: Path) -> Receipt:
        return self._run("download", name, cwd=dest_dir, stream=True).raise_for_status()
