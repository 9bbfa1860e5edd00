"""Subprocess execution for the platform CLI.

Every external call goes through ``SubprocessRunner``. ``run`` always returns a
``CommandOutcome`` so callers that have a fallback can branch on ``ok``;
``check`` turns a failed outcome into a ``CommandError`` for callers where a
failure must abort the run.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import Protocol, Sequence

from forkdemo.core.errors import ForkDemoError

logger = logging.getLogger(__name__)

# Shell convention for "command not found".
NOT_FOUND_RETURNCODE = 127


@dataclass(frozen=True)
class CommandOutcome:
    """
    Result of one external command.

    Attributes:
        argv: The command that was executed.
        returncode: Process exit status (127 when the executable is missing).
        stdout: Captured standard output.
        stderr: Captured standard error, or the OS error for a missing binary.
    """

    argv: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def command_line(self) -> str:
        return shlex.join(self.argv)

    @property
    def detail(self) -> str:
        """Best available explanation of a failure."""
        return (self.stderr or self.stdout).strip() or f"exit status {self.returncode}"


class CommandError(ForkDemoError):
    """Raised when an external command exits non-zero or cannot be started."""

    def __init__(self, outcome: CommandOutcome):
        self.outcome = outcome
        super().__init__(
            f"Command failed ({outcome.returncode}): {outcome.command_line}\n"
            f"{outcome.detail}"
        )


class CommandRunner(Protocol):
    """Interface for executing external commands."""

    def run(self, argv: Sequence[str]) -> CommandOutcome:
        """Execute ``argv`` and return its outcome without raising on failure."""
        ...

    def check(self, argv: Sequence[str]) -> CommandOutcome:
        """Execute ``argv`` and raise ``CommandError`` unless it succeeds."""
        ...


class SubprocessRunner:
    """Runs commands with ``subprocess.run`` and echoes their output to the log."""

    def run(self, argv: Sequence[str]) -> CommandOutcome:
        args = tuple(argv)
        logger.info("> %s", shlex.join(args))
        try:
            proc = subprocess.run(
                list(args),
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError as exc:
            outcome = CommandOutcome(
                argv=args, returncode=NOT_FOUND_RETURNCODE, stderr=str(exc)
            )
            logger.error("Error executing command: %s", outcome.detail)
            return outcome

        outcome = CommandOutcome(
            argv=args,
            returncode=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )
        if outcome.stdout:
            logger.info("%s", outcome.stdout.rstrip())
        if outcome.stderr:
            logger.warning("%s", outcome.stderr.rstrip())
        if not outcome.ok:
            logger.error("Error executing command: %s", outcome.detail)
        return outcome

    def check(self, argv: Sequence[str]) -> CommandOutcome:
        outcome = self.run(argv)
        if not outcome.ok:
            raise CommandError(outcome)
        return outcome
