"""Logging setup for the CLI.

Core modules log through ``logging.getLogger(__name__)``; the CLI routes those
records to the shared Rich console.
"""

from __future__ import annotations

import logging

from rich.logging import RichHandler

from forkdemo.cli.common.output import console


def configure_logging(*, verbose: bool = False) -> None:
    """Send ``forkdemo`` log records to the Rich console.

    Args:
        verbose: Enable DEBUG-level output. When False, INFO and above.
    """
    handler = RichHandler(
        console=console,
        show_time=False,
        show_path=verbose,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("forkdemo").setLevel(logging.DEBUG if verbose else logging.INFO)
    logging.getLogger("psycopg").setLevel(logging.WARNING)
