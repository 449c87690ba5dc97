"""
Passwall Installer — CLI entrypoint.

Usage:
    python -m passwall_installer.main --help
    passwall-installer -v
    passwall-installer --config installer.yml
"""

from __future__ import annotations

import logging
import os
import signal
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import click

from passwall_installer import __version__
from passwall_installer.core.observability.logging_config import setup_logging

logger = logging.getLogger(__name__)


@contextmanager
def _sigterm_as_exit() -> Iterator[None]:
    """Turn SIGTERM into SystemExit so cleanup blocks run before exiting."""

    def _handler(signum: int, frame) -> None:
        raise SystemExit(128 + signum)

    previous = signal.signal(signal.SIGTERM, _handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGTERM, previous)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="passwall-installer")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Only show warnings and errors.")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to installer.yml (default: $PWI_CONFIG or ./installer.yml).",
)
def cli(verbose: bool, quiet: bool, config_path: str | None) -> None:
    """Passwall Installer — add Passwall feeds and packages to an OpenWrt router."""
    # ── Logging setup (once, at process start) ──────────────────
    if verbose:
        level = "DEBUG"
    elif quiet:
        level = "WARNING"
    else:
        level = os.environ.get("PWI_LOG_LEVEL", "INFO")

    setup_logging(
        level=level,
        log_file=os.environ.get("PWI_LOG_FILE"),
        log_file_level=os.environ.get("PWI_LOG_FILE_LEVEL"),
    )
    logger.debug("Verbose mode enabled")

    from passwall_installer.core.config.loader import load_config
    from passwall_installer.core.context import RunContext
    from passwall_installer.core.errors import InstallerError
    from passwall_installer.core.services import installer

    try:
        with _sigterm_as_exit():
            config = load_config(Path(config_path) if config_path else None)
            ctx = RunContext(config=config)
            installer.run(ctx)
    except KeyboardInterrupt:
        click.echo(err=True)
        logger.error("Interrupted")
        sys.exit(130)
    except InstallerError as e:
        logger.error("%s", e)
        sys.exit(1)
    except SystemExit as e:
        if e.code not in (None, 0):
            logger.error("Installer exited with error (code %s)", e.code)
        raise


if __name__ == "__main__":
    cli()
