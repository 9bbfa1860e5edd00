"""Single-statement Postgres execution and the demo's test-table queries.

Each ``QueryExecutor.execute`` call opens its own connection, runs exactly one
statement and closes the connection before returning, on success or failure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence
from urllib.parse import parse_qsl, unquote, urlsplit

import psycopg
from psycopg.rows import dict_row

from forkdemo.core.config import DEFAULT_SSLMODE

logger = logging.getLogger(__name__)

Row = dict[str, Any]

CREATE_TEST_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS test_data (
    id SERIAL PRIMARY KEY,
    message TEXT NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    db_name TEXT NOT NULL
)
"""

INSERT_TEST_ROW_SQL = """
INSERT INTO test_data (message, db_name)
VALUES (%s, %s)
RETURNING *
"""

SELECT_TEST_ROWS_SQL = "SELECT * FROM test_data ORDER BY created_at DESC"


@dataclass(frozen=True)
class ConnectionDescriptor:
    """
    Parsed connection parameters.

    Attributes:
        host: Server host name.
        port: Server port.
        dbname: Database name (URI path), or None.
        user: Login role, percent-decoded.
        password: Password, percent-decoded.
        options: Extra URI query parameters passed through to libpq.
    """

    host: str | None
    port: int = 5432
    dbname: str | None = None
    user: str | None = None
    password: str | None = None
    options: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def parse(cls, connection_string: str) -> ConnectionDescriptor:
        parts = urlsplit(connection_string)
        return cls(
            host=parts.hostname,
            port=parts.port or 5432,
            dbname=parts.path.lstrip("/") or None,
            user=unquote(parts.username) if parts.username else None,
            password=unquote(parts.password) if parts.password else None,
            options=dict(parse_qsl(parts.query)),
        )

    def connect_kwargs(self, sslmode: str = DEFAULT_SSLMODE) -> dict[str, Any]:
        """Keyword arguments for ``psycopg.connect``; URI options override ``sslmode``."""
        kwargs: dict[str, Any] = {
            "host": self.host,
            "port": self.port,
            "dbname": self.dbname,
            "user": self.user,
            "password": self.password,
            "sslmode": sslmode,
        }
        kwargs = {k: v for k, v in kwargs.items() if v is not None}
        kwargs.update(self.options)
        return kwargs


@dataclass(frozen=True)
class QueryResult:
    rows: list[Row]
    rowcount: int


class QueryExecutor:
    """Runs one SQL statement per connection."""

    def __init__(
        self,
        sslmode: str = DEFAULT_SSLMODE,
        connect: Callable[..., psycopg.Connection] = psycopg.connect,
    ):
        self.sslmode = sslmode
        self._connect = connect

    def run(
        self,
        connection_string: str,
        query: str,
        params: Sequence[Any] | None = None,
    ) -> QueryResult:
        """Execute ``query`` on a fresh connection and return rows and rowcount."""
        kwargs = ConnectionDescriptor.parse(connection_string).connect_kwargs(
            self.sslmode
        )
        conn = self._connect(autocommit=True, row_factory=dict_row, **kwargs)
        try:
            with conn.cursor() as cur:
                cur.execute(query, params)
                rows = list(cur.fetchall()) if cur.description else []
                return QueryResult(rows=rows, rowcount=cur.rowcount)
        finally:
            conn.close()

    def execute(
        self,
        connection_string: str,
        query: str,
        description: str,
        params: Sequence[Any] | None = None,
    ) -> list[Row]:
        """Execute ``query``, log its outcome under ``description`` and return the rows."""
        logger.info("%s", description)
        logger.info("Query: %s", " ".join(query.split()))

        result = self.run(connection_string, query, params)

        logger.info("Query executed successfully")
        if result.rows:
            for row in result.rows:
                logger.info("  %s", row)
        elif result.rowcount >= 0:
            logger.info("Rows affected: %d", result.rowcount)
        return result.rows


def insert_test_row(executor: QueryExecutor, connection_string: str, db_name: str) -> Row:
    """Ensure ``test_data`` exists, insert one row tagged ``db_name`` and return it."""
    executor.execute(
        connection_string,
        CREATE_TEST_TABLE_SQL,
        f"Creating test table in {db_name} (if not exists)",
    )
    rows = executor.execute(
        connection_string,
        INSERT_TEST_ROW_SQL,
        f"Inserting test row into {db_name}",
        params=(f"Test message from {db_name}", db_name),
    )
    return rows[0]


def query_test_rows(executor: QueryExecutor, connection_string: str, db_name: str) -> list[Row]:
    """Return every ``test_data`` row, newest first."""
    return executor.execute(
        connection_string,
        SELECT_TEST_ROWS_SQL,
        f"Querying all test rows from {db_name}",
    )
