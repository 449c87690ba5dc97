"""
System adapter — downloads, signing keys, config reload, reboot.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from passwall_installer.adapters.shell.command import CommandRunner
from passwall_installer.core.models.action import Receipt

logger = logging.getLogger(__name__)


class SystemAdapter:
    """Router-level commands that are not package operations."""

    def __init__(self, runner: CommandRunner | None = None):
        self._runner = runner or CommandRunner(adapter="system")

    def missing_commands(self, commands: Iterable[str]) -> list[str]:
        missing = []
        for cmd in commands:
            logger.debug("Checking dependency: '%s'", cmd)
            if not self._runner.is_available(cmd):
                missing.append(cmd)
        return missing

    def fetch(self, url: str, dest: Path) -> Receipt:
        return self._runner.run(["wget", "-O", str(dest), url], stream=True).raise_for_status()

    def add_key(self, key_file: Path) -> Receipt:
        return self._runner.run(["opkg-key", "add", str(key_file)]).raise_for_status()

    def reload_config(self) -> Receipt:
        return self._runner.run(["/sbin/reload_config"]).raise_for_status()

    def reboot(self) -> Receipt:
        return self._runner.run(["reboot"]).raise_for_status()
