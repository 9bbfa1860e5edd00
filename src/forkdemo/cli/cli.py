"""CLI application for the Tiger Data zero-copy fork demo."""

from pathlib import Path

import typer

from forkdemo.cli.commands.demo import run, show_config
from forkdemo.cli.commands.forks import delete
from forkdemo.cli.common.context import build_context
from forkdemo.cli.common.options import EnvFileOpt, VerboseOpt

app = typer.Typer(
    help="forkdemo - zero-copy database forking demo for Tiger Data",
    no_args_is_help=True,
)


@app.callback()
def _init(
    ctx: typer.Context,
    env_file: Path | None = EnvFileOpt,
    verbose: bool = VerboseOpt,
):
    """Load environment and logging once per invocation."""
    ctx.obj = build_context(env_file, verbose=verbose)


app.command("run")(run)
app.command("config")(show_config)
app.command("delete")(delete)


if __name__ == "__main__":
    app()
