"""Runtime configuration for the fork demo.

All environment lookups happen once, in ``ForkDemoConfig.from_env``. The
resulting frozen object is handed explicitly to every component so nothing
below the CLI layer reads ``os.environ`` on its own.
"""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass, field, replace
from typing import Mapping

DEFAULT_CLI_COMMAND = "tiger"
DEFAULT_SSLMODE = "require"

# Checked in order; the first non-empty value names the source service.
SOURCE_SERVICE_ENV_VARS = ("MAIN_DB", "TIGER_SERVICE_ID", "TIGER_SERVICE")


def _first_non_empty(env: Mapping[str, str], names: tuple[str, ...]) -> str | None:
    """Return the first non-empty value among ``names`` in ``env``."""
    for name in names:
        value = (env.get(name) or "").strip()
        if value:
            return value
    return None


def _non_empty(env: Mapping[str, str], name: str) -> str | None:
    value = (env.get(name) or "").strip()
    return value or None


@dataclass(frozen=True)
class FallbackDatabase:
    """
    Discrete connection fields used when the CLI cannot supply a connection string.

    Attributes:
        host: Database host (``TD_DB_HOST``).
        port: Database port as text (``TD_DB_PORT``).
        user: Login role (``TD_DB_USER``).
        password: Password (``TD_DB_PASSWORD``); empty means no password.
    """

    host: str = "localhost"
    port: str = "5432"
    user: str = "postgres"
    password: str = ""

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> FallbackDatabase:
        """Build fallback fields, defaulting each one independently."""
        return cls(
            host=_non_empty(env, "TD_DB_HOST") or cls.host,
            port=_non_empty(env, "TD_DB_PORT") or cls.port,
            user=_non_empty(env, "TD_DB_USER") or cls.user,
            password=env.get("TD_DB_PASSWORD") or "",
        )


@dataclass(frozen=True)
class ForkDemoConfig:
    """
    Resolved settings for one demo run.

    Attributes:
        cli_command: Command used to invoke the platform CLI (``TIGER_CLI``).
        source_service_id: Explicit source service, if configured.
        fork_name: Explicit fork name (``TIGER_FORK_NAME``), if configured.
        main_db_url: Connection string override for the source database.
        fallback: Fields used to synthesize a connection string.
        sslmode: libpq ``sslmode`` applied unless the URI sets its own.
        cleanup_on_error: Delete the fork when a later step fails.
    """

    cli_command: str = DEFAULT_CLI_COMMAND
    source_service_id: str | None = None
    fork_name: str | None = None
    main_db_url: str | None = None
    fallback: FallbackDatabase = field(default_factory=FallbackDatabase)
    sslmode: str = DEFAULT_SSLMODE
    cleanup_on_error: bool = False

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> ForkDemoConfig:
        """Build the configuration from environment variables."""
        env = os.environ if env is None else env
        return cls(
            cli_command=_non_empty(env, "TIGER_CLI") or DEFAULT_CLI_COMMAND,
            source_service_id=_first_non_empty(env, SOURCE_SERVICE_ENV_VARS),
            fork_name=_non_empty(env, "TIGER_FORK_NAME"),
            main_db_url=_non_empty(env, "MAIN_DB_URL"),
            fallback=FallbackDatabase.from_env(env),
            sslmode=_non_empty(env, "TD_DB_SSLMODE") or DEFAULT_SSLMODE,
        )

    def with_overrides(self, **overrides: object) -> ForkDemoConfig:
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self

    @property
    def cli_argv(self) -> list[str]:
        """The CLI command split into argv form (``TIGER_CLI`` may hold arguments)."""
        return shlex.split(self.cli_command)

    def summary(self) -> dict[str, str]:
        """Return a printable view of the configuration with secrets masked."""
        return {
            "Source service id": self.source_service_id or "<not resolved>",
            "Fork name": self.fork_name or "<generated>",
            "CLI command": self.cli_command,
            "MAIN_DB_URL": "<set>" if self.main_db_url else "<undefined>",
            "Fallback host": self.fallback.host,
            "Fallback port": self.fallback.port,
            "Fallback user": self.fallback.user,
            "Fallback password": "<set>" if self.fallback.password else "<empty>",
            "sslmode": self.sslmode,
        }


def env_snapshot(env: Mapping[str, str] | None = None) -> dict[str, str]:
    """Return the raw values of the variables the demo reads, password masked."""
    env = os.environ if env is None else env
    names = (
        *SOURCE_SERVICE_ENV_VARS,
        "TIGER_FORK_NAME",
        "TIGER_CLI",
        "MAIN_DB_URL",
        "TD_DB_HOST",
        "TD_DB_PORT",
        "TD_DB_USER",
        "TD_DB_SSLMODE",
    )
    snapshot = {name: env.get(name) or "<undefined>" for name in names}
    snapshot["TD_DB_PASSWORD"] = (
        "<set>" if env.get("TD_DB_PASSWORD") else "<empty or undefined>"
    )
    return snapshot
