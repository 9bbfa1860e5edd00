"""Common CLI options for the CLI."""

import typer

EnvFileOpt = typer.Option(
    None,
    "--env-file",
    help="Load environment variables from this file (default: ./.env)",
    dir_okay=False,
)

VerboseOpt = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Show debug logging",
)

SourceOpt = typer.Option(
    None,
    "--source",
    "-s",
    help="Service ID to fork (overrides MAIN_DB / TIGER_SERVICE_ID / TIGER_SERVICE)",
)

ForkNameOpt = typer.Option(
    None,
    "--fork-name",
    help="Name for the fork (overrides TIGER_FORK_NAME; default <source>-fork-<ms>)",
)

CliCommandOpt = typer.Option(
    None,
    "--cli",
    help="Tiger CLI command (overrides TIGER_CLI; default 'tiger')",
)

CleanupOnErrorOpt = typer.Option(
    False,
    "--cleanup-on-error/--keep-fork-on-error",
    help="Delete the fork if a step after its creation fails",
)

ServiceIdArg = typer.Argument(..., help="Service ID of the fork to delete")
