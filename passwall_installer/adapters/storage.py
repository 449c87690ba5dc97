"""
Storage adapter — free space on the router's writable mount.

Reads ``df`` output, which on OpenWrt (busybox) is always in 1K blocks.
"""

from __future__ import annotations

import logging

from passwall_installer.adapters.shell.command import CommandRunner
from passwall_installer.core.errors import ExternalToolError

logger = logging.getLogger(__name__)

BLOCK_SIZE = 1024


def parse_df_available(output: str, mount: str) -> int | None:
    """Available 1K blocks (4th column) for the line mounted on ``mount``."""
    for line in output.splitlines()[1:]:
        parts = line.split()
        if len(parts) >= 6 and parts[-1] == mount:
            try:
                return int(parts[3])
            except ValueError:
                return None
    return None


class StorageAdapter:
    """Query free space via ``df``."""

    def __init__(self, runner: CommandRunner | None = None):
        self._runner = runner or CommandRunner(adapter="df")

    def available_blocks(self, mount: str) -> int | None:
        receipt = self._runner.run(["df", mount])
        if receipt.failed:
            logger.debug("df %s failed: %s", mount, receipt.error)
            return None
        return parse_df_available(receipt.output, mount)

    def available_bytes(self, mount: str = "/overlay", fallback: str = "/") -> int:
        """Free bytes on ``mount``, or on ``fallback`` when ``mount`` is not separate.

        Raises:
            ExternalToolError: If neither mount is reported.
        """
        blocks = self.available_blocks(mount)
        if blocks is None:
            logger.debug("%s not reported separately, using %s", mount, fallback)
            blocks = self.available_blocks(fallback)
        if blocks is None:
            raise ExternalToolError(
                f"df {fallback}", stderr=f"no free-space figure for {mount} or {fallback}"
            )
        return blocks * BLOCK_SIZE
