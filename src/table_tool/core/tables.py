"""Table browsing and deletion operations.

Framework-agnostic business logic for the table commands. The CLI layer in
cli/commands/tables.py provides the typer interface; an HTTP layer would call
the same four functions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from table_tool.core import catalog
from table_tool.core.exceptions import InvalidArgumentError, NoPrimaryKeyError
from table_tool.core.filters import DEFAULT_PAGE_SIZE, parse_filters, parse_pagination
from table_tool.core.logging import get_logger
from table_tool.core.models import DeleteResult, TablePage
from table_tool.core.planner import plan_delete, plan_select

if TYPE_CHECKING:
    from collections.abc import Sequence

    from table_tool.core.client import PgClient
    from table_tool.core.filters import RawParams
    from table_tool.core.models import ColumnDescriptor


def list_tables(client: PgClient, schema: str) -> list[str]:
    """Base tables of the working schema, alphabetical."""
    return catalog.list_base_tables(client, schema)


def describe_table(client: PgClient, schema: str, table: str) -> list[ColumnDescriptor]:
    """Column descriptors of ``table``. Raises NotFoundError if unknown."""
    return catalog.inspect_table(client, schema, table)


def get_table_rows(
    client: PgClient,
    schema: str,
    table: str,
    raw_params: RawParams = (),
    page: int | str | None = None,
    page_size: int | str | None = None,
    *,
    default_page_size: int = DEFAULT_PAGE_SIZE,
    max_page_size: int | None = None,
) -> TablePage:
    """One page of ``table`` filtered by ``raw_params``, with the filtered total.

    Raises NotFoundError before any row query when the table is unknown,
    InvalidArgumentError on out-of-range pagination.
    """
    log = get_logger(__name__)
    pagination = parse_pagination(
        page,
        page_size,
        default_page_size=default_page_size,
        max_page_size=max_page_size,
    )
    columns = catalog.inspect_table(client, schema, table)
    conditions = parse_filters(raw_params, columns)
    select_plan, count_plan = plan_select(
        schema, table, columns, conditions, pagination
    )

    rows_result = client.execute(select_plan.statement, select_plan.bound_values)
    count_result = client.execute(count_plan.statement, count_plan.bound_values)
    total = int(count_result.rows[0][0]) if count_result.rows else 0

    names = [col.name for col in rows_result.columns]
    rows = [dict(zip(names, row, strict=True)) for row in rows_result.rows]
    log.debug(
        "fetched table page",
        table=table,
        filters=len(conditions),
        page=pagination.page,
        rows=len(rows),
        total=total,
    )
    return TablePage(
        columns=columns,
        rows=rows,
        total=total,
        page=pagination.page,
        page_size=pagination.page_size,
    )


def delete_rows(
    client: PgClient, schema: str, table: str, ids: Sequence[str | int]
) -> DeleteResult:
    """Delete rows of ``table`` whose primary key is in ``ids``.

    Ids that match no row are not an error; ``deleted`` reports only the
    rows the server actually removed. Never retried: a lost confirmation
    must not turn into a second delete.
    """
    log = get_logger(__name__)
    if not ids:
        raise InvalidArgumentError("At least one id is required")

    columns = catalog.inspect_table(client, schema, table)
    pk_column = catalog.primary_key_column(columns)
    if pk_column is None:
        raise NoPrimaryKeyError(
            f"Table {table} has no single-column primary key; rows cannot be deleted by id"
        )

    plan = plan_delete(schema, table, columns, pk_column, ids)
    result = client.execute(plan.statement, plan.bound_values)
    log.info(
        "deleted rows",
        table=table,
        requested=len(ids),
        deleted=result.affected_rows,
    )
    return DeleteResult(deleted=result.affected_rows)
