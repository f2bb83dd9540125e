"""PostgreSQL client for Table Tool.

Borrows connections from a shared psycopg_pool.ConnectionPool and runs one
statement per borrow with PostgreSQL native ``$n`` placeholders. Driver and
pool failures are mapped to the TableToolError hierarchy with messages that
never echo SQL text or server error details.

The pool is process-wide state: create_pool() builds it once from resolved
configuration, the owner closes it at shutdown, and PgClient only holds a
reference to it.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

import psycopg
import psycopg.errors
import sentry_sdk
import structlog
from psycopg_pool import ConnectionPool, PoolTimeout

from table_tool.core.exceptions import BackendUnavailableError, TimeoutError
from table_tool.core.models import ColumnMeta, QueryResult

if TYPE_CHECKING:
    from collections.abc import Sequence

    from table_tool.core.config import ResolvedConfig

# Seconds a caller waits for a pooled connection before giving up.
_POOL_WAIT_TIMEOUT = 10.0


def create_pool(config: ResolvedConfig, *, open: bool = True) -> ConnectionPool:
    """Build the shared connection pool.

    The statement timeout is a per-connection server setting, so every query
    issued through the pool inherits it.
    """
    timeout_ms = int(config.statement_timeout * 1000)
    pool = ConnectionPool(
        config.dsn,
        min_size=config.pool_min_size,
        max_size=config.pool_max_size,
        kwargs={
            "autocommit": True,
            "application_name": config.application_name,
            "options": f"-c statement_timeout={timeout_ms}",
        },
        timeout=_POOL_WAIT_TIMEOUT,
        name="table-tool",
        open=False,
    )
    if open:
        pool.open()
    return pool


class PgClient:
    """Executes single statements on connections borrowed from a shared pool."""

    def __init__(self, pool: ConnectionPool, statement_timeout: float = 30.0) -> None:
        self.pool = pool
        self.statement_timeout = statement_timeout

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> QueryResult:
        """Execute one statement and return a QueryResult."""
        log = structlog.get_logger()
        sql_normalized = " ".join(sql.split())
        span_description = sql_normalized[:100]
        log.debug(
            "executing statement",
            sql=sql_normalized,
            param_count=len(params) if params else 0,
        )
        with sentry_sdk.start_span(op="db.query", description=span_description) as span:
            start_time = time.monotonic()
            try:
                with self.pool.connection() as conn, psycopg.RawCursor(conn) as cur:
                    cur.execute(sql, params)

                    columns: list[ColumnMeta] = []
                    rows: list[tuple[Any, ...]] = []

                    if cur.description:
                        for desc in cur.description:
                            info = conn.adapters.types.get(desc.type_code)
                            columns.append(
                                ColumnMeta(
                                    name=desc.name,
                                    type_oid=desc.type_code,
                                    type_name=info.name if info else "unknown",
                                )
                            )
                        rows = cur.fetchall()

                    duration_ms = (time.monotonic() - start_time) * 1000
                    span.set_data("row_count", len(rows))
                    span.set_data("duration_ms", duration_ms)
                    log.debug(
                        "statement complete",
                        duration_ms=f"{duration_ms:.1f}",
                        row_count=len(rows),
                        affected_rows=cur.rowcount,
                    )

                    return QueryResult(
                        columns=columns,
                        rows=rows,
                        row_count=len(rows),
                        status_message=cur.statusmessage or "",
                        affected_rows=max(cur.rowcount, 0),
                    )

            except PoolTimeout as e:
                span.set_status("unavailable")
                log.error("no connection available", error=str(e))
                msg = "Database unavailable: could not obtain a connection"
                raise BackendUnavailableError(msg, internal_details=str(e)) from e
            except psycopg.errors.QueryCanceled as e:
                duration_ms = (time.monotonic() - start_time) * 1000
                span.set_data("duration_ms", duration_ms)
                span.set_status("deadline_exceeded")
                log.error(
                    "statement timeout",
                    sql=sql_normalized,
                    duration_ms=f"{duration_ms:.1f}",
                )
                msg = f"Query timed out after {self.statement_timeout}s"
                raise TimeoutError(msg, internal_details=str(e)) from e
            except psycopg.Error as e:
                span.set_status("internal_error")
                log.error(
                    "database error",
                    sql=sql_normalized,
                    sqlstate=e.sqlstate,
                    error=str(e),
                )
                msg = "Database error while executing the request"
                if e.sqlstate:
                    msg = f"{msg} (SQLSTATE {e.sqlstate})"
                raise BackendUnavailableError(
                    msg, internal_details=f"{e} -- {sql_normalized}"
                ) from e
