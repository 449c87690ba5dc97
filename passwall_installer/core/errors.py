"""
Error taxonomy for the installer.

Only ``main.py`` decides exit status. Everything below it raises
one of these and lets it propagate.
"""

from __future__ import annotations


class InstallerError(Exception):
    """Base class for all installer failures."""


# ── User input ──────────────────────────────────────────────────


class UserInputError(InstallerError):
    """Invalid or missing user input."""


class PromptAborted(UserInputError):
    """Input stream closed while a prompt still needed an answer."""

    def __init__(self, prompt: str):
        self.prompt = prompt
        super().__init__(f"No input received for: {prompt}")


# ── Programming / configuration ─────────────────────────────────


class ConfigurationError(InstallerError):
    """Bad validator arguments, unknown validation kind, or invalid config file."""


# ── Resources ───────────────────────────────────────────────────


class ResourceError(InstallerError):
    """A resource the run depends on is missing or insufficient."""


class PackageNotFoundError(ResourceError):
    """Package has no candidate version in any configured feed."""

    def __init__(self, package: str):
        self.package = package
        super().__init__(f"Package '{package}' not found in repository")


class InsufficientSpaceError(ResourceError):
    """Not enough free storage for the planned install."""

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        self.shortfall = required - available
        super().__init__(
            f"Insufficient space. Missing approx {self.shortfall} bytes."
        )


class DependencyError(ResourceError):
    """Required command missing or firmware not supported."""


# ── External tools ──────────────────────────────────────────────


class ExternalToolError(InstallerError):
    """An external command exited non-zero."""

    def __init__(self, command: str, returncode: int | None = None, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr or (
            f"exited with code {returncode}" if returncode is not None else "failed"
        )
        super().__init__(f"Command '{command}' failed: {detail}")
