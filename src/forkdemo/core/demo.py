"""End-to-end fork demo.

Resolve the source service, fork it, write to the fork only, read both
databases to show the fork's data is independent, then delete the fork. Steps
run strictly in order; the first error aborts the rest.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from forkdemo.core.config import ForkDemoConfig
from forkdemo.core.connections import (
    ConnectionCli,
    get_connection_string,
    get_source_connection_string,
)
from forkdemo.core.process import CommandError
from forkdemo.core.queries import QueryExecutor, Row, insert_test_row, query_test_rows
from forkdemo.core.services import (
    Fork,
    ServiceCli,
    create_fork,
    default_fork_name,
    delete_fork,
    resolve_source_service_id,
)

logger = logging.getLogger(__name__)


class DemoCli(ServiceCli, ConnectionCli, Protocol):
    """Every CLI operation the demo needs."""


@dataclass(frozen=True)
class DemoReport:
    """
    What a completed run observed.

    Attributes:
        source_service_id: The service that was forked.
        fork: The fork that was created and deleted.
        inserted: The row written to the fork.
        source_rows: ``test_data`` rows read from the source afterwards.
        fork_rows: ``test_data`` rows read from the fork afterwards.
    """

    source_service_id: str
    fork: Fork
    inserted: Row
    source_rows: list[Row]
    fork_rows: list[Row]

    @property
    def isolated(self) -> bool:
        """True when the fork holds rows the source does not."""
        return len(self.fork_rows) > len(self.source_rows)


def _compare(
    cli: DemoCli,
    config: ForkDemoConfig,
    executor: QueryExecutor,
    source_service_id: str,
    fork: Fork,
) -> DemoReport:
    logger.info("Step 2: Getting connection strings...")
    source_conn = get_source_connection_string(cli, config, source_service_id)
    fork_conn = get_connection_string(cli, config, fork.service_id)
    logger.info("Connection strings retrieved")

    logger.info("Step 3: Running sample query on fork...")
    inserted = insert_test_row(executor, fork_conn, fork.service_id)

    logger.info("Step 4: Comparing data between main and fork...")
    source_rows = query_test_rows(executor, source_conn, source_service_id)
    fork_rows = query_test_rows(executor, fork_conn, fork.service_id)

    return DemoReport(
        source_service_id=source_service_id,
        fork=fork,
        inserted=inserted,
        source_rows=source_rows,
        fork_rows=fork_rows,
    )


def run_demo(
    config: ForkDemoConfig,
    cli: DemoCli,
    executor: QueryExecutor | None = None,
) -> DemoReport:
    """
    Run the full fork demo once.

    Args:
        config: Resolved configuration for this run.
        cli: Platform CLI adapter.
        executor: Query executor; one honoring ``config.sslmode`` by default.

    Returns:
        A DemoReport describing both databases after the fork was written to.

    Raises:
        ConfigurationError: if no source service can be resolved.
        CommandError: if forking or deleting fails.
        psycopg.Error: on any database failure.

    When a step after fork creation fails, the fork is left in place unless
    ``config.cleanup_on_error`` is set.
    """
    executor = executor or QueryExecutor(sslmode=config.sslmode)

    source_service_id = resolve_source_service_id(config, cli)
    fork_name = config.fork_name or default_fork_name(source_service_id)

    logger.info("Step 1: Creating fork")
    fork = create_fork(cli, source_service_id, fork_name)

    try:
        report = _compare(cli, config, executor, source_service_id, fork)
    except Exception:
        if not config.cleanup_on_error:
            logger.warning(
                "Fork '%s' was left in place; delete it with 'forkdemo delete %s'",
                fork.service_id,
                fork.service_id,
            )
            raise
        logger.warning("Run failed; deleting fork '%s'", fork.service_id)
        try:
            delete_fork(cli, fork.service_id)
        except CommandError as exc:
            logger.error("Could not delete fork '%s': %s", fork.service_id, exc)
        raise

    logger.info("Main DB has %d test row(s)", len(report.source_rows))
    logger.info("Fork DB has %d test row(s)", len(report.fork_rows))

    logger.info("Step 5: Deleting fork")
    delete_fork(cli, fork.service_id)
    return report
