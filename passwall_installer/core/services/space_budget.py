"""
Space budget — does the planned download fit in free storage?

``required = total + buffer``; the check fails when ``required`` exceeds
the available bytes. The available figure comes from ``df``, which
reports 1K blocks; the storage adapter multiplies by 1024 before it
gets here.
"""

from __future__ import annotations

import logging

from passwall_installer.core.models.package import DEFAULT_BUFFER_BYTES, SpaceReport

logger = logging.getLogger(__name__)

_UNITS = (
    (1 << 40, "TB"),
    (1 << 30, "GB"),
    (1 << 20, "MB"),
    (1 << 10, "KB"),
)


def format_bytes(size: int) -> str:
    """Human-readable size with one truncated decimal: ``1536`` → ``1.5 KB``."""
    for div, unit in _UNITS:
        if size >= div:
            whole, remainder = divmod(size, div)
            return f"{whole}.{remainder * 10 // div} {unit}"
    return f"{size} B"


def check_space(
    total_bytes: int,
    available_bytes: int,
    buffer: int = DEFAULT_BUFFER_BYTES,
) -> SpaceReport:
    """Compare the planned download plus buffer against free space."""
    required = total_bytes + buffer
    passed = required <= available_bytes

    logger.info("Download size: %s (%d bytes)", format_bytes(total_bytes), total_bytes)
    logger.info("Est. required: %s (%d bytes)", format_bytes(required), required)
    logger.info("Free space:    %s (%d bytes)", format_bytes(available_bytes), available_bytes)

    return SpaceReport(
        total_bytes=total_bytes,
        buffer_bytes=buffer,
        required_bytes=required,
        available_bytes=available_bytes,
        passed=passed,
        shortfall=0 if passed else required - available_bytes,
    )
