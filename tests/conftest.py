"""
Shared test fixtures and configuration.

Contexts are built on the fakes in tests/fakes.py, so no test
touches subprocess or the real /etc.
"""

import io
import logging
from pathlib import Path

import pytest

from passwall_installer.core.context import RunContext
from passwall_installer.core.models.config import InstallerConfig
from passwall_installer.core.services.prompts import Prompter

from tests.fakes import RELEASE_FILE, FakeOpkg, FakeStorage, FakeSystem


# ── Fixtures ─────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _drop_installed_log_handlers():
    """Remove handlers setup_logging() attached during a test."""
    root = logging.getLogger()
    before, level = set(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in before and type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def make_prompter():
    """Build a Prompter fed with the given input lines."""

    def _make(*lines: str) -> Prompter:
        stdin = io.StringIO("".join(f"{line}\n" for line in lines))
        return Prompter(stdin=stdin, stdout=io.StringIO(), color=False)

    return _make


@pytest.fixture
def router_root(tmp_path: Path) -> Path:
    """A fake router filesystem with a release file and DHCP config."""
    etc = tmp_path / "etc"
    (etc / "opkg").mkdir(parents=True)
    (etc / "config").mkdir()
    (etc / "openwrt_release").write_text(RELEASE_FILE)
    (etc / "config" / "dhcp").write_text("config dnsmasq\n")
    return tmp_path


@pytest.fixture
def installer_config(router_root: Path) -> InstallerConfig:
    etc = router_root / "etc"
    return InstallerConfig(
        feed_file=etc / "opkg" / "customfeeds.conf",
        release_file=etc / "openwrt_release",
        dhcp_config=etc / "config" / "dhcp",
        packages=["dnsmasq-full", "xray-core", "unzip"],
    )


@pytest.fixture
def make_context(installer_config, make_prompter):
    """Build a RunContext with fake adapters and scripted answers."""

    def _make(*answers, opkg=None, storage=None, system=None) -> RunContext:
        return RunContext(
            config=installer_config,
            prompter=make_prompter(*answers),
            opkg=opkg or FakeOpkg(),
            storage=storage or FakeStorage(),
            system=system or FakeSystem(),
        )

    return _make
