"""
Package reconciliation — compare installed and candidate versions.

Walks the declared package list in order, asks the query service for
each package's state, and classifies it:

    installed == candidate  → skip
    installed, different    → update
    not installed           → install

Only update/install entries count toward the download total. A package
with no candidate aborts the whole pass with ``PackageNotFoundError``;
installing a partial Passwall set leaves the router half-configured.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from passwall_installer.core.errors import PackageNotFoundError
from passwall_installer.core.models.package import (
    PackageQuery,
    PlanEntry,
    ReconciliationResult,
)
from passwall_installer.core.services.space_budget import format_bytes

logger = logging.getLogger(__name__)

QueryFn = Callable[[str], PackageQuery]

_ACTION_LABELS = {
    "install": " + {name}: Queued for install",
    "update": " + {name}: Update found",
    "skip": " - {name}: Up to date, skipping",
}


def classify(query: PackageQuery) -> PlanEntry:
    """Classify a single queried package.

    Raises:
        PackageNotFoundError: If there is no candidate version.
    """
    if not query.found:
        raise PackageNotFoundError(query.name)

    if query.installed_version == query.candidate_version:
        action = "skip"
    elif query.installed_version:
        action = "update"
    else:
        action = "install"

    return PlanEntry(
        name=query.name,
        action=action,
        version=query.candidate_version,
        installed_version=query.installed_version,
        size=query.candidate_size,
    )


def log_entry(entry: PlanEntry) -> None:
    """Log one classified package the way the install summary shows it."""
    logger.info(_ACTION_LABELS[entry.action].format(name=entry.name))
    logger.info("   Version: %s", entry.version)
    logger.info("   Installed version: %s", entry.installed_version or "-")
    logger.info("   Size: %s (%d bytes)", format_bytes(entry.size), entry.size)


def reconcile(names: Iterable[str], query_fn: QueryFn) -> ReconciliationResult:
    """Build the install plan for ``names``.

    Args:
        names: Package names in the order they should be installed.
        query_fn: Returns a fresh ``PackageQuery`` for a package name.

    Returns:
        All classifications (skips included) and the total download
        size of the non-skip entries.

    Raises:
        PackageNotFoundError: On the first package missing upstream.
    """
    entries: list[PlanEntry] = []
    total = 0

    for name in names:
        query = query_fn(name)
        if not query.found:
            logger.error("Package '%s' not found in repository", name)
        entry = classify(query)
        log_entry(entry)
        entries.append(entry)
        if entry.action != "skip":
            total += entry.size

    result = ReconciliationResult(entries=tuple(entries), total_size=total)
    logger.debug("Packages to install: [%s]", ", ".join(result.to_install))
    return result
