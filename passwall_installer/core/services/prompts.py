"""
Interactive prompts — yes/no, menu select, hidden input, typed input.

Every prompt prints its question once, then loops on a ``> `` input
line until the answer is acceptable. Invalid answers are reported on
the error log and asked again; there is no retry limit.

Prompts return their value. Closed input (Ctrl+D, exhausted pipe)
counts as "no" for yes/no questions and raises ``PromptAborted``
everywhere an answer is mandatory.
"""

from __future__ import annotations

import io
import logging
import os
import sys
from contextlib import contextmanager
from typing import IO, Iterator, Sequence

import click

from passwall_installer.core.errors import ConfigurationError, PromptAborted
from passwall_installer.core.models.prompt import MenuOption, PromptSpec
from passwall_installer.core.services.validators import ANY, get_validator

try:
    import termios
except ImportError:  # non-POSIX
    termios = None

logger = logging.getLogger(__name__)

_YES = frozenset({"y", "yes", "Y", "YES", "Yes"})
_NO = frozenset({"n", "no", "N", "NO", "No"})


def _fileno(stream: IO[str]) -> int | None:
    try:
        return stream.fileno()
    except (AttributeError, OSError, io.UnsupportedOperation):
        return None


@contextmanager
def echo_disabled(stream: IO[str]) -> Iterator[None]:
    """Turn terminal echo off for the duration of the block.

    No-op when the stream is not a TTY. The saved terminal state is
    restored on every exit path.
    """
    fd = _fileno(stream)
    if termios is None or fd is None or not os.isatty(fd):
        yield
        return

    saved = termios.tcgetattr(fd)
    quiet = termios.tcgetattr(fd)
    quiet[3] &= ~termios.ECHO
    termios.tcsetattr(fd, termios.TCSADRAIN, quiet)
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


class Prompter:
    """Reads answers from an input stream and writes prompts to an output stream.

    Holds no state between calls; two prompts fed the same input give
    the same answer.
    """

    def __init__(
        self,
        stdin: IO[str] | None = None,
        stdout: IO[str] | None = None,
        color: bool | None = None,
    ):
        self._stdin = stdin
        self._stdout = stdout
        self._color = color

    @property
    def stdin(self) -> IO[str]:
        return self._stdin if self._stdin is not None else sys.stdin

    @property
    def stdout(self) -> IO[str]:
        return self._stdout if self._stdout is not None else sys.stdout

    # ── Low-level I/O ───────────────────────────────────────────

    def _write(self, text: str, nl: bool = True) -> None:
        click.echo(text, file=self.stdout, nl=nl, color=self._color)
        self.stdout.flush()

    def _question(self, text: str) -> None:
        self._write(click.style(text, fg="green"))

    def _input_line(self, default: str | None) -> None:
        self._write(f"> [{default}] " if default else "> ", nl=False)

    def _readline(self) -> str | None:
        """Read one line without its terminator. None at end of input."""
        line = self.stdin.readline()
        if not line:
            return None
        return line.rstrip("\r\n")

    # ── Yes / No ────────────────────────────────────────────────

    def ask_yes_no(self, question: str, default: str | None = None) -> bool:
        """Ask a yes/no question.

        Args:
            question: Text shown above the input line.
            default: ``"Y"`` or ``"N"`` (any case), used on empty input.

        Returns:
            True for yes. End of input counts as no.
        """
        if default and default.upper() not in ("Y", "N"):
            raise ConfigurationError(f"yes/no default must be Y or N, got {default!r}")

        if not default:
            hint = "> [y/n] "
        elif default.upper() == "Y":
            hint = "> [Y/n] "
        else:
            hint = "> [y/N] "

        self._question(question)
        while True:
            self._write(hint, nl=False)
            answer = self._readline()
            if answer is None:
                logger.debug("End of input on %r, treating as no", question)
                return False

            if not answer and default:
                answer = default

            if answer in _YES:
                return True
            if answer in _NO:
                return False
            logger.error("Please answer yes or no")

    # ── Menu select ─────────────────────────────────────────────

    def select(
        self,
        prompt: str,
        options: Sequence[MenuOption | tuple[str, str]],
        default: str | None = None,
    ) -> str:
        """Show a numbered menu and return the mapped value of the chosen entry.

        Options are ``MenuOption`` objects or ``(spec, description)``
        pairs where spec is ``token`` or ``token:mapped``. Tokens are
        matched in declaration order; the first match wins.
        """
        entries = [
            opt if isinstance(opt, MenuOption) else MenuOption.parse(*opt)
            for opt in options
        ]
        if not entries:
            raise ConfigurationError("select() needs at least one option")

        logger.debug("select %r default=%r", prompt, default)
        self._question(prompt)
        for entry in entries:
            logger.debug("option: %s -> %s (%s)", entry.token, entry.value, entry.description)
            self._write(f"  [{entry.token}] {entry.description}")

        while True:
            self._input_line(default)
            answer = self._readline()
            if answer is None:
                raise PromptAborted(prompt)

            if not answer:
                if not default:
                    logger.error("Input required")
                    continue
                answer = default

            for entry in entries:
                if entry.token == answer:
                    logger.debug("selected: %s", entry.value)
                    return entry.value

            logger.error("Invalid answer, try again.")

    # ── Hidden input ────────────────────────────────────────────

    def ask_hidden(self, prompt: str, default: str | None = None) -> str:
        """Read one line with terminal echo off (passwords, secrets).

        Empty input returns the default, or an empty string without one.
        """
        self._question(prompt)
        self._input_line(default)

        with echo_disabled(self.stdin):
            answer = self._readline()

        # the user's Enter was not echoed
        self._write("")

        if not answer and default:
            return default
        return answer or ""

    # ── Typed input ─────────────────────────────────────────────

    def ask(
        self,
        prompt: str,
        default: str | None = None,
        kind: str = ANY,
        args: Sequence[object] = (),
    ) -> str:
        """Ask for a value and retry until it passes the ``kind`` validator.

        Args:
            prompt: Question text, shown once.
            default: Used when the user just presses Enter.
            kind: ``any``, ``number``, ``string``, ``enum``, ``ipv4``,
                ``port`` or ``range``.
            args: Validator arguments (``string``: min, max;
                ``enum``: options; ``range``: min, max).

        Raises:
            ConfigurationError: Unknown kind or malformed args.
            PromptAborted: Input closed before a valid answer.
        """
        validator = get_validator(kind)
        args = tuple(args)
        if validator is not None:
            validator.validate_args(*args)

        logger.debug("ask %r default=%r kind=%s args=%r", prompt, default, kind, args)
        self._question(prompt)

        while True:
            self._input_line(default)
            answer = self._readline()
            if answer is None:
                raise PromptAborted(prompt)

            if not answer:
                answer = default or ""

            if validator is None:
                return answer

            if not answer:
                logger.error("Input required")
                continue

            if not validator.validate(answer, *args):
                logger.error(validator.error_message(*args))
                continue

            logger.debug("input: %s", answer)
            return answer

    def ask_spec(self, spec: PromptSpec) -> str:
        """Run a typed prompt described by a ``PromptSpec``."""
        return self.ask(spec.prompt, spec.default, spec.kind, spec.args)
