"""Output formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {msg}")

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {v}")

    def traceback(self) -> None:
        """Print the exception currently being handled."""
        console.print_exception()

    def rows_table(self, rows: Iterable[Mapping[str, Any]], title: str = "Rows") -> None:
        """
        Render query result rows; columns come from the first row.
        """
        rows = list(rows)
        t = Table(title=title, show_lines=False)
        if not rows:
            t.add_column("(no rows)", style="meta")
            console.print(t)
            return

        columns = list(rows[0].keys())
        for col in columns:
            t.add_column(str(col), style="ok" if col == "id" else None)
        for row in rows:
            t.add_row(*("" if row.get(c) is None else str(row.get(c)) for c in columns))

        console.print(t)

    def summary_table(self, report: Any, title: str = "Summary") -> None:
        """
        Expects a DemoReport-like object with .source_service_id .fork
        .source_rows .fork_rows
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Database")
        t.add_column("Service ID", style="ok", no_wrap=True)
        t.add_column("Test rows", justify="right")

        t.add_row("Main", str(report.source_service_id), str(len(report.source_rows)))
        t.add_row("Fork", str(report.fork.service_id), str(len(report.fork_rows)))

        console.print(t)


out = Out()
