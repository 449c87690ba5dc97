"""
Receipt model — the outcome of one external command.

Adapters hand back Receipts rather than raising. Services that
cannot continue after a failed command call ``raise_for_status()``.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from passwall_installer.core.errors import ExternalToolError


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Receipt(BaseModel):
    """Result of running one command through an adapter."""

    adapter: str
    command: str
    status: Literal["ok", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None
    return_code: int | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the command succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the command failed."""
        return self.status == "failed"

    def raise_for_status(self) -> Receipt:
        """Raise ExternalToolError if this receipt is a failure."""
        if self.failed:
            raise ExternalToolError(
                self.command,
                returncode=self.return_code,
                stderr=self.error or "",
            )
        return self

    @classmethod
    def success(
        cls,
        adapter: str,
        command: str,
        output: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a success receipt."""
        return cls(
            adapter=adapter,
            command=command,
            status="ok",
            output=output,
            **kwargs,
        )

    @classmethod
    def failure(
        cls,
        adapter: str,
        command: str,
        error: str,
        **kwargs: Any,
    ) -> Receipt:
        """Create a failure receipt."""
        return cls(
            adapter=adapter,
            command=command,
            status="failed",
            error=error,
            **kwargs,
        )
