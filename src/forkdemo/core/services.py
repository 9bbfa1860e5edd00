"""Source-service resolution and fork lifecycle.

Functions here take a ``TigerCliAdapter``-shaped object and plain values; they
do not print. Progress is reported through the module logger.
"""

from __future__ import annotations

import json
import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Protocol

from forkdemo.core.config import ForkDemoConfig
from forkdemo.core.errors import ConfigurationError
from forkdemo.core.process import CommandOutcome

logger = logging.getLogger(__name__)

_TABLE_SERVICE_ID = re.compile(r"│\s+Service ID\s+│\s+(\w+)\s+│")
_NEW_SERVICE_ID = re.compile(r"New Service ID:\s+(\w+)")


class ServiceCli(Protocol):
    """Interface for the CLI operations used by the fork lifecycle."""

    def fork_service(self, source_service_id: str, fork_name: str) -> CommandOutcome:
        ...

    def delete_service(self, service_id: str) -> CommandOutcome:
        ...

    def show_config(self) -> CommandOutcome:
        ...


@dataclass(frozen=True)
class Fork:
    """
    A fork created during this run.

    Attributes:
        name: The name requested at creation.
        service_id: Identifier reported by the CLI (the name when none was found).
    """

    name: str
    service_id: str


def _service_id_from_config(payload: Any) -> str | None:
    """Read ``service_id`` or ``config.service_id`` from a parsed config document."""
    if not isinstance(payload, dict):
        return None
    value = payload.get("service_id")
    if not value and isinstance(payload.get("config"), dict):
        value = payload["config"].get("service_id")
    return str(value) if value else None


def resolve_source_service_id(config: ForkDemoConfig, cli: ServiceCli) -> str:
    """
    Determine which service to fork.

    An explicitly configured id wins. Otherwise the CLI's stored default is read
    once via ``config show --output json``.

    Raises:
        ConfigurationError: if neither source yields an id.
    """
    if config.source_service_id:
        return config.source_service_id

    outcome = cli.show_config()
    if outcome.ok:
        try:
            inferred = _service_id_from_config(json.loads(outcome.stdout))
        except json.JSONDecodeError as exc:
            logger.warning("Unable to parse Tiger CLI config output: %s", exc)
        else:
            if inferred:
                return inferred
            logger.warning("Tiger CLI config has no default service_id")
    else:
        logger.warning(
            "Unable to read default service_id from Tiger CLI config: %s",
            outcome.detail,
        )

    raise ConfigurationError(
        "Unable to determine Tiger service ID. Set MAIN_DB or TIGER_SERVICE_ID."
    )


def default_fork_name(source_service_id: str, now: float | None = None) -> str:
    """Return ``<source>-fork-<epoch millis>``."""
    millis = int((time.time() if now is None else now) * 1000)
    return f"{source_service_id}-fork-{millis}"


def parse_fork_service_id(output: str) -> str | None:
    """
    Extract the new service id from ``service fork`` output.

    Tried in order: a JSON object carrying ``service_id``, the bordered table
    row ``│ Service ID │ <id> │``, and a ``New Service ID: <id>`` line.
    """
    text = output.strip()
    if text.startswith("{"):
        try:
            payload = json.loads(text)
        except json.JSONDecodeError:
            payload = None
        if isinstance(payload, dict) and payload.get("service_id"):
            return str(payload["service_id"])

    match = _TABLE_SERVICE_ID.search(output) or _NEW_SERVICE_ID.search(output)
    return match.group(1) if match else None


def create_fork(cli: ServiceCli, source_service_id: str, fork_name: str) -> Fork:
    """Create a zero-copy fork of ``source_service_id`` at its current state."""
    logger.info(
        "Creating zero-copy fork '%s' from '%s'...", fork_name, source_service_id
    )
    outcome = cli.fork_service(source_service_id, fork_name)

    service_id = parse_fork_service_id(outcome.stdout)
    if service_id is None:
        logger.warning(
            "No service id found in fork output; using fork name '%s'", fork_name
        )
        service_id = fork_name

    logger.info("Fork '%s' created (Service ID: %s)", fork_name, service_id)
    return Fork(name=fork_name, service_id=service_id)


def delete_fork(cli: ServiceCli, service_id: str) -> None:
    """Delete a fork by its service id."""
    logger.info("Deleting fork '%s'...", service_id)
    cli.delete_service(service_id)
    logger.info("Fork '%s' deleted", service_id)
