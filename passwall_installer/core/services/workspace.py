"""
Scoped resources — temp workspace and feed-file backup.

Both are context managers, entered where the resource is acquired,
so cleanup runs on every exit path: normal return, exception,
Ctrl+C, or SIGTERM (which main.py turns into SystemExit).
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from types import TracebackType
from typing import Iterator

logger = logging.getLogger(__name__)


@contextmanager
def temp_workspace(prefix: str = "passwall.", base: Path | None = None) -> Iterator[Path]:
    """Create a temp directory and remove it when the block exits."""
    path = Path(tempfile.mkdtemp(prefix=prefix, dir=str(base) if base else None))
    logger.debug("Created temp directory '%s'", path)
    try:
        yield path
    finally:
        if path.is_dir():
            logger.debug("Removing temp directory '%s'", path)
            shutil.rmtree(path, ignore_errors=True)


def _is_failure(exc_type: type[BaseException] | None, exc: BaseException | None) -> bool:
    if exc_type is None:
        return False
    if isinstance(exc, SystemExit):
        return exc.code not in (None, 0)
    return True


class FileBackup:
    """Back up a config file before it is edited; restore it if the run fails.

    ``capture()`` copies ``path`` to ``path.bak`` (or notes that the file
    did not exist yet). On a failed exit the backup is moved back over
    the file, or the newly created file is removed. On success the new
    file stays and the ``.bak`` copy is kept next to it.

    Restoration happens at most once per instance.
    """

    def __init__(self, path: Path, suffix: str = ".bak"):
        self.path = Path(path)
        self.backup_path = self.path.with_name(self.path.name + suffix)
        self._captured = False
        self._existed = False
        self._done = False

    @property
    def captured(self) -> bool:
        return self._captured

    def capture(self) -> None:
        """Take the backup. Only the first call has any effect."""
        if self._captured:
            return
        self._existed = self.path.is_file()
        if self._existed:
            logger.info(
                "Backing up old file '%s' -> '%s'", self.path, self.backup_path,
            )
            shutil.copy2(self.path, self.backup_path)
        self._captured = True

    def restore(self) -> bool:
        """Put the original file back. Returns True if anything changed."""
        if self._done or not self._captured:
            return False
        self._done = True

        if self._existed and self.backup_path.is_file():
            logger.info(
                "Restoring original file from backup '%s' -> '%s'",
                self.backup_path, self.path,
            )
            shutil.move(str(self.backup_path), str(self.path))
            return True

        if not self._existed and self.path.exists():
            logger.info("Removing '%s' created during the failed run", self.path)
            self.path.unlink()
            return True
        return False

    def __enter__(self) -> FileBackup:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if _is_failure(exc_type, exc):
            self.restore()
        else:
            self._done = True
