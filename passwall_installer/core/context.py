"""
Run context — everything one installer run needs, built once at startup.

main.py constructs a RunContext and passes it down; services read
the config, prompter and adapters from it instead of module globals.
Tests build their own with fake adapters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from passwall_installer.adapters.opkg import OpkgAdapter
from passwall_installer.adapters.storage import StorageAdapter
from passwall_installer.adapters.system import SystemAdapter
from passwall_installer.core.models.config import InstallerConfig
from passwall_installer.core.services.prompts import Prompter


@dataclass
class RunContext:
    """Per-run configuration, I/O and tool handles."""

    config: InstallerConfig = field(default_factory=InstallerConfig)
    prompter: Prompter = field(default_factory=Prompter)
    opkg: OpkgAdapter = field(default_factory=OpkgAdapter)
    storage: StorageAdapter = field(default_factory=StorageAdapter)
    system: SystemAdapter = field(default_factory=SystemAdapter)
    tmp_dir: Path | None = None

    def workdir(self) -> Path:
        """The run's temp directory. Only valid inside ``temp_workspace``."""
        if self.tmp_dir is None:
            raise RuntimeError("temp workspace not created yet")
        return self.tmp_dir
