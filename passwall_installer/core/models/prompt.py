"""
Prompt models — typed-input specs and menu options.

Both are built per prompt call and thrown away once it resolves.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class PromptSpec(BaseModel):
    """A typed-input prompt: text, optional default, validation kind and args."""

    model_config = ConfigDict(frozen=True)

    prompt: str
    default: str | None = None
    kind: str = "any"
    args: tuple[Any, ...] = ()

    @model_validator(mode="after")
    def _check_default(self) -> PromptSpec:
        # Unknown kinds and bad args raise ConfigurationError here too,
        # which pydantic lets through untouched.
        from passwall_installer.core.errors import ConfigurationError
        from passwall_installer.core.services.validators import get_validator

        validator = get_validator(self.kind)
        if validator is None:
            return self
        validator.validate_args(*self.args)
        if self.default and not validator.validate(self.default, *self.args):
            raise ConfigurationError(
                f"Default {self.default!r} fails '{self.kind}' validation"
            )
        return self


class MenuOption(BaseModel):
    """One menu entry: what the user types, what is returned, and its label."""

    model_config = ConfigDict(frozen=True)

    token: str
    value: str
    description: str = ""

    @classmethod
    def parse(cls, spec: str, description: str = "") -> MenuOption:
        """Build from ``token`` or ``token:mapped`` (split on the first colon)."""
        token, sep, mapped = spec.partition(":")
        return cls(token=token, value=mapped if sep else token, description=description)
