"""
Installer orchestration — preflight, feeds, packages, reboot.

Sequence of one run:

    preflight (commands on PATH, not a SNAPSHOT build)
      └─ temp workspace + feed-file backup
           ├─ install feeds     (confirm → key → feeds file)
           ├─ install packages  (confirm → plan → space gate → confirm → opkg)
           └─ reboot prompt

Any exception inside the workspace block restores the feeds file
and removes the temp directory before it reaches main.py.
"""

from __future__ import annotations

import logging
import shutil

from passwall_installer.core.context import RunContext
from passwall_installer.core.errors import DependencyError
from passwall_installer.core.models.package import ReconciliationResult
from passwall_installer.core.services.feeds import (
    append_feeds,
    build_feeds,
    is_snapshot,
    release_and_arch,
)
from passwall_installer.core.services.reconciler import reconcile
from passwall_installer.core.services.space_budget import check_space
from passwall_installer.core.services.workspace import FileBackup, temp_workspace

logger = logging.getLogger(__name__)

DNSMASQ_FULL = "dnsmasq-full"


# ── Preflight ───────────────────────────────────────────────────


def _read_release(ctx: RunContext) -> str:
    path = ctx.config.release_file
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise DependencyError(f"Cannot read {path}: {e}") from e


def check_dependencies(ctx: RunContext) -> None:
    missing = ctx.system.missing_commands(ctx.config.required_commands)
    if missing:
        raise DependencyError(
            "Missing dependency: " + ", ".join(f"'{cmd}'" for cmd in missing)
        )


def check_snapshot(ctx: RunContext) -> None:
    logger.info("Checking the distributive version")
    ctx.system.reload_config()
    if is_snapshot(_read_release(ctx)):
        raise DependencyError("SNAPSHOT version not supported")
    logger.info("Distributive version is not SNAPSHOT, ok!")


def preflight(ctx: RunContext) -> None:
    check_dependencies(ctx)
    check_snapshot(ctx)


# ── Feeds ───────────────────────────────────────────────────────


def install_feeds(ctx: RunContext, backup: FileBackup) -> bool:
    """Add the Passwall feeds and signing key. Returns False if the user declined."""
    prompter = ctx.prompter
    config = ctx.config

    if not prompter.ask_yes_no("Install passwall feeds?", "Y"):
        return False

    release, arch = release_and_arch(_read_release(ctx))
    feeds = build_feeds(config, release, arch)

    logger.info("Distributive release:      %s", release)
    logger.info("Distributive architecture: %s", arch)
    logger.info("Passwall feed public key:  %s", config.public_key_url)
    for feed in feeds:
        logger.info("Feed %s -> %s", feed.name, feed.url)

    if not prompter.ask_yes_no("Ready to install passwall feeds?", "Y"):
        return False

    logger.debug("Installing passwall feed public key")
    key_file = ctx.workdir() / config.public_key_name
    ctx.system.fetch(config.public_key_url, key_file)
    ctx.system.add_key(key_file)

    backup.capture()
    logger.debug("Installing passwall feeds")
    append_feeds(config.feed_file, feeds)

    logger.info("Passwall feeds installed!")
    return True


# ── Packages ────────────────────────────────────────────────────


def plan_packages(ctx: RunContext) -> ReconciliationResult:
    return reconcile(ctx.config.packages, ctx.opkg.query)


def install_packages(ctx: RunContext) -> bool:
    """Plan, space-check and install the package set.

    Returns False if the user declined or there was nothing to do.

    Raises:
        PackageNotFoundError: A package is missing from every feed.
        InsufficientSpaceError: The plan does not fit in free storage.
        ExternalToolError: opkg or df failed.
    """
    prompter = ctx.prompter
    config = ctx.config

    if not prompter.ask_yes_no("Install passwall packages?", "Y"):
        return False

    logger.info("Update packages")
    ctx.opkg.update()

    plan = plan_packages(ctx)
    if plan.nothing_to_do:
        logger.info("Nothing to do. All packages installed and current.")
        return False

    available = ctx.storage.available_bytes(config.storage_mount, config.fallback_mount)
    check_space(plan.total_size, available, config.buffer_bytes).raise_for_shortfall()
    logger.info("Space check passed")

    if not prompter.ask_yes_no("Ready to install passwall packages?", "Y"):
        return False

    for name in plan.to_install:
        logger.info("Installing %s...", name)
        if name == DNSMASQ_FULL:
            install_dnsmasq_full(ctx)
        else:
            ctx.opkg.install(name)

    logger.info("Passwall packages installed!")
    return True


def install_dnsmasq_full(ctx: RunContext) -> None:
    """Swap stock dnsmasq for dnsmasq-full.

    The package is downloaded first so the router is never left without
    a DHCP server if the feed is unreachable after ``dnsmasq`` is removed.
    """
    workdir = ctx.workdir()
    dhcp = ctx.config.dhcp_config

    ctx.opkg.download(DNSMASQ_FULL, workdir)

    if ctx.opkg.is_installed("dnsmasq"):
        if dhcp.is_file():
            dhcp_bak = dhcp.with_name(dhcp.name + ".bak")
            logger.info("Backing up old DHCP config '%s' -> '%s'", dhcp, dhcp_bak)
            shutil.copy2(dhcp, dhcp_bak)
        logger.info("Removing old dnsmasq package...")
        ctx.opkg.remove("dnsmasq")
    else:
        logger.debug("dnsmasq not installed, skipping remove")

    ctx.opkg.install(DNSMASQ_FULL, cache_dir=workdir)
    resolve_dhcp_config(ctx)


def resolve_dhcp_config(ctx: RunContext) -> str | None:
    """Pick the primary DHCP config when opkg left a ``dhcp-opkg`` copy.

    opkg keeps the existing ``/etc/config/dhcp`` and writes the package
    default next to it. Returns the choice, or None if there was no copy.
    """
    dhcp = ctx.config.dhcp_config
    opkg_copy = dhcp.with_name(dhcp.name + "-opkg")
    if not opkg_copy.is_file():
        return None

    choice = ctx.prompter.select(
        "Which DHCP config should make the primary one?",
        [("1:old", "dnsmasq (old)"), ("2:new", "dnsmasq-full (new)")],
        default="1",
    )
    if choice == "new":
        logger.info("Move file '%s' -> '%s'", opkg_copy, dhcp)
        shutil.move(str(opkg_copy), str(dhcp))
    else:
        logger.info("Leave the configuration as it is")
    return choice


# ── Whole run ───────────────────────────────────────────────────


def run(ctx: RunContext) -> None:
    """Run the full interactive install."""
    preflight(ctx)

    with temp_workspace() as tmp, FileBackup(ctx.config.feed_file) as backup:
        ctx.tmp_dir = tmp
        try:
            install_feeds(ctx, backup)
            install_packages(ctx)
        finally:
            ctx.tmp_dir = None

        # A failed reboot or Ctrl+C here also restores the feeds file
        if ctx.prompter.ask_yes_no("Do you want to reboot device?", "Y"):
            logger.info("Rebooting...")
            ctx.system.reboot()
