"""Exit handling utilities for the CLI."""

from typing import NoReturn

import typer

from forkdemo.cli.common.output import out


def die(msg: str, code: int = 1) -> NoReturn:
    """Exit with an error message and optional exit code."""
    out.error(msg)
    raise typer.Exit(code)


def exit_from_exc(exc: Exception, *, message: str, code: int = 1) -> NoReturn:
    """
    Print an error message with the active traceback and exit with ``code``.

    Must be called from inside the ``except`` block handling ``exc``.
    """
    out.error(message)
    out.traceback()
    raise typer.Exit(code) from exc
