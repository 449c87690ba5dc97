"""
Input validators — pure predicates over user-typed strings (no I/O).

Every validator takes the candidate string first, then its
kind-specific arguments, and returns a bool. A ``False`` result means
the user typed something invalid and should be asked again.

Arguments that are themselves malformed (wrong count, non-numeric
bounds) are a bug in the calling code, not a user mistake, so they
raise ``ConfigurationError`` instead of returning ``False``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable

from passwall_installer.core.errors import ConfigurationError

_DIGITS = re.compile(r"[0-9]+")
_SIGNED_DIGITS = re.compile(r"-?[0-9]+")


def _bound(kind: str, label: str, value: Any, *, signed: bool) -> int:
    """Parse a validator bound given as int or numeric string."""
    if isinstance(value, bool):
        raise ConfigurationError(f"'{kind}' {label} must be a number")
    if isinstance(value, int):
        if not signed and value < 0:
            raise ConfigurationError(f"'{kind}' {label} must be a number")
        return value
    pattern = _SIGNED_DIGITS if signed else _DIGITS
    if isinstance(value, str) and pattern.fullmatch(value):
        return int(value)
    raise ConfigurationError(f"'{kind}' {label} must be a number")


def _no_args(kind: str, args: tuple) -> None:
    if args:
        raise ConfigurationError(
            f"'{kind}' takes no additional arguments (got {len(args)})"
        )


def _string_bounds(args: tuple) -> tuple[int | None, int | None]:
    """Parse ``string`` arguments into ``(min, max)``; None means unbounded."""
    if len(args) > 2:
        raise ConfigurationError(
            f"'string' takes at most 2 arguments (got {len(args)})"
        )
    bounds = []
    for label, raw in zip(("min length", "max length"), (*args, None, None)):
        if raw in (None, ""):
            bounds.append(None)
        else:
            bounds.append(_bound("string", label, raw, signed=False))
    return bounds[0], bounds[1]


def _enum_options(args: tuple) -> None:
    if not args:
        raise ConfigurationError("'enum' requires at least one allowed value")


def _range_bounds(args: tuple) -> tuple[int, int]:
    if len(args) != 2:
        raise ConfigurationError(
            f"'range' takes exactly 2 arguments (got {len(args)})"
        )
    return (
        _bound("range", "min", args[0], signed=True),
        _bound("range", "max", args[1], signed=True),
    )


# ── Validators ──────────────────────────────────────────────────


def validate_number(value: str, *args: Any) -> bool:
    """Non-empty string of ASCII digits (no sign, no whitespace)."""
    _no_args("number", args)
    return bool(_DIGITS.fullmatch(value))


def validate_string(value: str, *args: Any) -> bool:
    """Length within optional ``min`` and ``max`` bounds.

    ``None`` or an empty string for a bound means "no bound".
    """
    min_len, max_len = _string_bounds(args)
    length = len(value)
    if min_len is not None and length < min_len:
        return False
    if max_len is not None and length > max_len:
        return False
    return True


def validate_enum(value: str, *options: Any) -> bool:
    """Exact match against one of the allowed options."""
    _enum_options(options)
    return any(value == str(opt) for opt in options)


def validate_ipv4(value: str, *args: Any) -> bool:
    """Dotted quad, each octet a digit string no greater than 255."""
    _no_args("ipv4", args)
    octets = value.split(".")
    if len(octets) != 4:
        return False
    for octet in octets:
        # also rejects empty groups from leading, trailing or doubled dots
        if not _DIGITS.fullmatch(octet):
            return False
        if int(octet) > 255:
            return False
    return True


def validate_port(value: str, *args: Any) -> bool:
    """All digits, between 1 and 65535."""
    _no_args("port", args)
    if not _DIGITS.fullmatch(value):
        return False
    return 1 <= int(value) <= 65535


def validate_range(value: str, *args: Any) -> bool:
    """Integer (optional leading ``-``) within ``[min, max]`` inclusive."""
    low, high = _range_bounds(args)
    if not _SIGNED_DIGITS.fullmatch(value):
        return False
    return low <= int(value) <= high


# ── Kind registry ───────────────────────────────────────────────


def format_inline(items: Any) -> str:
    """Render items as ``[a, b, c]``."""
    return "[" + ", ".join(str(i) for i in items) + "]"


@dataclass(frozen=True)
class ValidatorKind:
    """A named validator, its argument check, and its rejection message."""

    name: str
    check: Callable[..., bool]
    message: Callable[[tuple], str]
    check_args: Callable[[tuple], Any]

    def validate(self, value: str, *args: Any) -> bool:
        return self.check(value, *args)

    def validate_args(self, *args: Any) -> None:
        """Raise ConfigurationError if ``args`` do not fit this kind."""
        self.check_args(args)

    def error_message(self, *args: Any) -> str:
        return self.message(args)


VALIDATORS: dict[str, ValidatorKind] = {
    "number": ValidatorKind(
        "number", validate_number, lambda a: "Enter a valid number",
        partial(_no_args, "number"),
    ),
    "string": ValidatorKind(
        "string", validate_string, lambda a: "Invalid string", _string_bounds,
    ),
    "enum": ValidatorKind(
        "enum", validate_enum, lambda a: f"Must be one of: {format_inline(a)}",
        _enum_options,
    ),
    "ipv4": ValidatorKind(
        "ipv4", validate_ipv4, lambda a: "Invalid IPv4 (e.g., 192.168.1.1)",
        partial(_no_args, "ipv4"),
    ),
    "port": ValidatorKind(
        "port", validate_port, lambda a: "Port must be 1-65535",
        partial(_no_args, "port"),
    ),
    "range": ValidatorKind(
        "range",
        validate_range,
        lambda a: f"Must be between {a[0]}-{a[1]}" if len(a) == 2 else "Out of range",
        _range_bounds,
    ),
}

ANY = "any"


def get_validator(kind: str) -> ValidatorKind | None:
    """Look up a validator kind. Returns None for ``any``.

    Raises:
        ConfigurationError: If the kind is unknown.
    """
    if kind == ANY:
        return None
    try:
        return VALIDATORS[kind]
    except KeyError:
        raise ConfigurationError(f"Unknown type '{kind}'") from None


def validate(kind: str, value: str, *args: Any) -> bool:
    """Run the named validator. ``any`` accepts everything."""
    validator = get_validator(kind)
    if validator is None:
        return True
    return validator.validate(value, *args)
