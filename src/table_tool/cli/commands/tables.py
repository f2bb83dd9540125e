"""Table browsing and deletion CLI commands.

Thin CLI layer: typer decorators, argument parsing, output formatting.
Business logic delegated to the core.tables module.
"""

from __future__ import annotations

from typing import Annotated

import typer

from table_tool.cli.commands._shared import (
    describe_result,
    get_client,
    get_config,
    output_page,
    output_result,
    parse_filter_args,
)
from table_tool.core.models import ColumnMeta, QueryResult
from table_tool.core.tables import (
    delete_rows,
    describe_table,
    get_table_rows,
    list_tables,
)


def tables_command(ctx: typer.Context) -> None:
    """List base tables of the working schema."""
    config = get_config(ctx)
    client = get_client(ctx)
    names = list_tables(client, config.schema_name)

    result = QueryResult(
        columns=[ColumnMeta(name="table", type_oid=25, type_name="text")],
        rows=[(name,) for name in names],
        row_count=len(names),
        status_message=f"SELECT {len(names)}",
    )
    output_result(ctx, result)


def describe_command(
    ctx: typer.Context,
    table: Annotated[str, typer.Argument(help="Table name")],
) -> None:
    """Show column names, types, nullability and the primary key of a table."""
    config = get_config(ctx)
    client = get_client(ctx)
    columns = describe_table(client, config.schema_name, table)
    output_result(ctx, describe_result(columns))


def rows_command(
    ctx: typer.Context,
    table: Annotated[str, typer.Argument(help="Table name")],
    where: Annotated[
        list[str] | None,
        typer.Option(
            "--where",
            "-w",
            help=(
                "Filter as column__operator=value (operators: equals, contains, "
                "starts_with, ends_with, is_null, is_not_null) or column=value. "
                "Repeatable; filters are combined with AND."
            ),
        ),
    ] = None,
    page: Annotated[
        int | None,
        typer.Option("--page", "-p", help="Page number, starting at 1"),
    ] = None,
    page_size: Annotated[
        int | None,
        typer.Option("--page-size", "-n", help="Rows per page"),
    ] = None,
) -> None:
    """
    Browse a page of table rows, optionally filtered.

    Unknown columns or operators in --where are ignored. The total row count
    under the same filters is reported with the page.
    """
    config = get_config(ctx)
    client = get_client(ctx)
    result = get_table_rows(
        client,
        config.schema_name,
        table,
        parse_filter_args(where),
        page,
        page_size,
        default_page_size=config.default_page_size,
        max_page_size=config.max_page_size,
    )
    output_page(ctx, result)


def delete_command(
    ctx: typer.Context,
    table: Annotated[str, typer.Argument(help="Table name")],
    ids: Annotated[
        list[str] | None,
        typer.Argument(help="Primary key values of the rows to delete"),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Do not ask for confirmation"),
    ] = False,
) -> None:
    """Delete rows by primary key. Ids that match no row are skipped."""
    ids = ids or []
    if ids and not yes:
        typer.confirm(
            f"Delete {len(ids)} row(s) from {table}?", abort=True, err=True
        )

    config = get_config(ctx)
    client = get_client(ctx)
    result = delete_rows(client, config.schema_name, table, ids)
    typer.echo(f"Deleted {result.deleted} row(s)")
