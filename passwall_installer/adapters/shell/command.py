"""
Shell command runner — execute external commands and capture the result.

This is the only place the installer touches subprocess. The runner
never raises for a failed command: the outcome is captured in a
Receipt, and the caller decides whether a failure is fatal.
"""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
import time
from pathlib import Path
from typing import Sequence

from passwall_installer.core.models.action import Receipt

logger = logging.getLogger(__name__)


class CommandRunner:
    """Run commands and return receipts.

    Args:
        adapter: Name recorded on every receipt.
        timeout: Default timeout in seconds.
    """

    def __init__(self, adapter: str = "shell", timeout: int = 300):
        self._adapter = adapter
        self._timeout = timeout

    @property
    def name(self) -> str:
        return self._adapter

    def is_available(self, command: str) -> bool:
        return shutil.which(command) is not None

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | str | None = None,
        timeout: int | None = None,
        stream: bool = False,
    ) -> Receipt:
        """Run ``args`` (no shell) and return a receipt.

        With ``stream=True`` the command's output goes straight to the
        terminal instead of being captured, for long package operations
        the user should watch.
        """
        command = shlex.join(args)
        timeout = timeout if timeout is not None else self._timeout

        logger.debug("Executing: %s (cwd=%s)", command, cwd or ".")
        start = time.monotonic()

        try:
            result = subprocess.run(
                list(args),
                cwd=str(cwd) if cwd else None,
                capture_output=not stream,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                adapter=self._adapter,
                command=command,
                error=f"Command timed out after {timeout}s",
                metadata={"timeout": timeout},
            )
        except OSError as e:
            return Receipt.failure(
                adapter=self._adapter,
                command=command,
                error=f"Command execution error: {e}",
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        output = (result.stdout or "").strip()
        stderr = (result.stderr or "").strip()

        if result.returncode == 0:
            return Receipt.success(
                adapter=self._adapter,
                command=command,
                output=output,
                duration_ms=elapsed_ms,
                return_code=result.returncode,
                metadata={"stderr": stderr},
            )

        return Receipt.failure(
            adapter=self._adapter,
            command=command,
            error=stderr or f"Command exited with code {result.returncode}",
            duration_ms=elapsed_ms,
            return_code=result.returncode,
            metadata={"stdout": output},
        )
