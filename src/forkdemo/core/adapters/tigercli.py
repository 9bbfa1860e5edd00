from __future__ import annotations

from forkdemo.core.config import ForkDemoConfig
from forkdemo.core.process import CommandOutcome, CommandRunner, SubprocessRunner


class TigerCliAdapter:
    """Adapter around the platform CLI's service, db and config commands."""

    def __init__(self, config: ForkDemoConfig, runner: CommandRunner | None = None):
        """Create an adapter invoking ``config.cli_command`` through ``runner``."""
        self.config = config
        self.runner = runner or SubprocessRunner()

    def _argv(self, *args: str) -> list[str]:
        return [*self.config.cli_argv, *args]

    def fork_service(self, source_service_id: str, fork_name: str) -> CommandOutcome:
        """Fork ``source_service_id`` at its current state. Raises on failure."""
        return self.runner.check(
            self._argv("service", "fork", source_service_id, "--name", fork_name, "--now")
        )

    def delete_service(self, service_id: str) -> CommandOutcome:
        """Delete a service without an interactive prompt. Raises on failure."""
        return self.runner.check(
            self._argv("service", "delete", service_id, "--confirm")
        )

    def connection_string(self, service_id: str) -> CommandOutcome:
        """Ask the CLI for a connection string including the password."""
        return self.runner.run(
            self._argv(
                "db", "connection-string", "--service-id", service_id, "--with-password"
            )
        )

    def show_config(self) -> CommandOutcome:
        """Return the CLI's stored configuration as JSON output."""
        return self.runner.run(self._argv("config", "show", "--output", "json"))
