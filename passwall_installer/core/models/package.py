"""
Package models — query results, install plan, and storage verdict.

A reconciliation pass turns one ``PackageQuery`` per declared package
into a ``PlanEntry``; the ordered entries plus the download total form
the ``ReconciliationResult``. ``SpaceReport`` is the space gate's verdict
on that total.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from passwall_installer.core.errors import InsufficientSpaceError

PackageAction = Literal["install", "update", "skip"]

# Extra allowance on top of the download size. opkg reports the
# compressed .ipk size; the unpacked files and dependencies need more.
DEFAULT_BUFFER_BYTES = 204800


class PackageQuery(BaseModel):
    """Installed and candidate state of one package."""

    name: str
    installed_version: str | None = None   # None = not installed
    candidate_version: str | None = None   # None = not found upstream
    candidate_size: int = 0

    @property
    def found(self) -> bool:
        return self.candidate_version is not None


class PlanEntry(BaseModel):
    """Classification of one package in a reconciliation pass."""

    model_config = ConfigDict(frozen=True)

    name: str
    action: PackageAction
    version: str
    installed_version: str | None = None
    size: int = 0


class ReconciliationResult(BaseModel):
    """Ordered package classifications and their combined download size."""

    model_config = ConfigDict(frozen=True)

    entries: tuple[PlanEntry, ...] = ()
    total_size: int = 0

    @property
    def to_install(self) -> list[str]:
        """Names of the packages that need installing or updating, in order."""
        return [e.name for e in self.entries if e.action != "skip"]

    @property
    def nothing_to_do(self) -> bool:
        return not self.to_install


class SpaceReport(BaseModel):
    """Verdict of the storage check."""

    model_config = ConfigDict(frozen=True)

    total_bytes: int
    buffer_bytes: int = DEFAULT_BUFFER_BYTES
    required_bytes: int
    available_bytes: int
    passed: bool
    shortfall: int = Field(default=0, ge=0)

    def raise_for_shortfall(self) -> SpaceReport:
        """Raise InsufficientSpaceError when the check failed."""
        if not self.passed:
            raise InsufficientSpaceError(self.required_bytes, self.available_bytes)
        return self
