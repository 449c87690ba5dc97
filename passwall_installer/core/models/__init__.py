"""
Domain models — Pydantic types for the installer.

All models are re-exported here for convenient access:

    from passwall_installer.core.models import PackageQuery, Receipt, InstallerConfig
"""

from passwall_installer.core.models.action import Receipt
from passwall_installer.core.models.config import InstallerConfig
from passwall_installer.core.models.package import (
    DEFAULT_BUFFER_BYTES,
    PackageQuery,
    PlanEntry,
    ReconciliationResult,
    SpaceReport,
)
from passwall_installer.core.models.prompt import MenuOption, PromptSpec

__all__ = [
    "DEFAULT_BUFFER_BYTES",
    # config.py
    "InstallerConfig",
    # prompt.py
    "MenuOption",
    # package.py
    "PackageQuery",
    "PlanEntry",
    "PromptSpec",
    # action.py
    "Receipt",
    "ReconciliationResult",
    "SpaceReport",
]
