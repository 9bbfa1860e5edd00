"""Commands for running the fork demo and inspecting its configuration."""

import typer
from rich.markup import escape

from forkdemo.cli.common.context import AppContext
from forkdemo.cli.common.exits import exit_from_exc
from forkdemo.cli.common.options import (
    CleanupOnErrorOpt,
    CliCommandOpt,
    ForkNameOpt,
    SourceOpt,
)
from forkdemo.cli.common.output import out
from forkdemo.core.config import env_snapshot
from forkdemo.core.demo import run_demo


def run(
    ctx: typer.Context,
    source: str | None = SourceOpt,
    fork_name: str | None = ForkNameOpt,
    cli: str | None = CliCommandOpt,
    cleanup_on_error: bool = CleanupOnErrorOpt,
):
    """
    Fork a database, write to the fork, compare both, delete the fork.
    """
    appctx: AppContext = ctx.obj
    config = appctx.config.with_overrides(
        source_service_id=source,
        fork_name=fork_name,
        cli_command=cli,
        cleanup_on_error=cleanup_on_error,
    )

    out.header("Tiger Data Database Forking Demo")
    out.kv(config.summary())

    try:
        report = run_demo(config, appctx.adapter(config))
    except Exception as exc:  # every failure ends the run with status 1
        exit_from_exc(exc, message=f"Error: {escape(str(exc))}")

    out.rows_table(report.source_rows, title=f"Main database ({report.source_service_id})")
    out.rows_table(report.fork_rows, title=f"Fork database ({report.fork.service_id})")
    out.summary_table(report)

    if report.isolated:
        out.success("Data isolation confirmed: fork has its own data!")
    else:
        out.warn("Fork and main report the same number of test rows")
    out.success("Demo completed successfully!")


def show_config(ctx: typer.Context):
    """
    Show the environment variables the demo reads and the resolved configuration.
    """
    appctx: AppContext = ctx.obj
    out.header("Environment configuration")
    out.kv(env_snapshot())
    out.header("Resolved configuration")
    out.kv(appctx.config.summary())
