"""Commands for managing forks outside a demo run."""

import typer
from rich.markup import escape

from forkdemo.cli.common.context import AppContext
from forkdemo.cli.common.exits import die
from forkdemo.cli.common.options import CliCommandOpt, ServiceIdArg
from forkdemo.cli.common.output import out
from forkdemo.core.process import CommandError
from forkdemo.core.services import delete_fork


def delete(
    ctx: typer.Context,
    service_id: str = ServiceIdArg,
    cli: str | None = CliCommandOpt,
):
    """
    Delete a fork, e.g. one left behind by a failed run.
    """
    appctx: AppContext = ctx.obj
    config = appctx.config.with_overrides(cli_command=cli)

    try:
        with out.status(f"Deleting {service_id}..."):
            delete_fork(appctx.adapter(config), service_id)
    except CommandError as exc:
        die(escape(str(exc)), code=1)

    out.success(f"Fork '{service_id}' deleted")
