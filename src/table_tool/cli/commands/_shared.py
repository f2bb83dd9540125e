"""Shared CLI plumbing for command modules.

Configuration and pool lifecycle, format-option handling, and output helpers.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import typer

from table_tool.cli.output import get_formatter, resolve_format, write_lines
from table_tool.core.client import PgClient, create_pool
from table_tool.core.config import load_config, resolve_config
from table_tool.core.models import ColumnMeta, QueryResult
from table_tool.formatters.base import render_json

if TYPE_CHECKING:
    from table_tool.core.config import ResolvedConfig
    from table_tool.core.models import ColumnDescriptor, TablePage


def get_config(ctx: typer.Context) -> ResolvedConfig:
    """Resolve configuration once per invocation.

    Raises ConfigError when no connection string is available.
    """
    obj = ctx.ensure_object(dict)
    cached = obj.get("resolved_config")
    if cached is not None:
        return cached

    config = load_config(obj.get("config_file"))
    cli_overrides: dict[str, Any] = {}
    for key in ("schema", "timeout"):
        val = obj.get(key)
        if val is not None:
            cli_overrides[key] = val

    resolved = resolve_config(
        config,
        profile_name=obj.get("profile"),
        dsn=obj.get("dsn"),
        **cli_overrides,
    )
    obj["resolved_config"] = resolved
    return resolved


def get_client(ctx: typer.Context) -> PgClient:
    """Client bound to the invocation's connection pool.

    The pool is created on first use and closed when the root context
    is torn down.
    """
    obj = ctx.ensure_object(dict)
    config = get_config(ctx)
    pool = obj.get("pool")
    if pool is None:
        pool = create_pool(config)
        obj["pool"] = pool
        ctx.find_root().call_on_close(pool.close)
    return PgClient(pool, statement_timeout=config.statement_timeout)


def format_options(ctx: typer.Context) -> dict[str, Any]:
    obj = ctx.ensure_object(dict)
    return {
        "format_flag": obj.get("format"),
        "compact": obj.get("compact", False),
        "width": obj.get("width", 40),
        "no_header": obj.get("no_header", False),
    }


def output_result(ctx: typer.Context, result: QueryResult) -> None:
    opts = format_options(ctx)
    formatter = get_formatter(**opts)
    write_lines(formatter.format(result))


def describe_result(columns: list[ColumnDescriptor]) -> QueryResult:
    rows = [
        (
            col.name,
            col.sql_type,
            "YES" if col.nullable else "NO",
            "PK" if col.is_primary_key else "",
        )
        for col in columns
    ]
    return QueryResult(
        columns=[
            ColumnMeta(name="column", type_oid=25, type_name="text"),
            ColumnMeta(name="type", type_oid=25, type_name="text"),
            ColumnMeta(name="nullable", type_oid=25, type_name="text"),
            ColumnMeta(name="key", type_oid=25, type_name="text"),
        ],
        rows=rows,
        row_count=len(rows),
        status_message=f"SELECT {len(rows)}",
    )


def page_result(page: TablePage) -> QueryResult:
    """Flatten a TablePage into a QueryResult for the table and csv formatters."""
    names = [col.name for col in page.columns]
    rows = [tuple(row.get(name) for name in names) for row in page.rows]
    return QueryResult(
        columns=[
            ColumnMeta(name=col.name, type_oid=0, type_name=col.sql_type)
            for col in page.columns
        ],
        rows=rows,
        row_count=len(rows),
        status_message=f"SELECT {len(rows)}",
    )


def page_footer(page: TablePage) -> str:
    if not page.rows:
        first = last = 0
    else:
        first = (page.page - 1) * page.page_size + 1
        last = first + len(page.rows) - 1
    return (
        f"rows {first}-{last} of {page.total}, page {page.page}/{page.page_count}"
    )


def output_page(ctx: typer.Context, page: TablePage) -> None:
    """JSON output keeps the page envelope; table and csv print the rows."""
    opts = format_options(ctx)
    fmt = resolve_format(opts["format_flag"])
    if fmt == "json":
        indent = None if opts["compact"] else 2
        envelope = page.model_dump(by_alias=True)
        write_lines([json.dumps(envelope, indent=indent, default=render_json)])
        return

    output_result(ctx, page_result(page))
    if fmt == "table":
        typer.echo(page_footer(page), err=True)


def parse_filter_args(values: list[str] | None) -> list[tuple[str, str | None]]:
    """Split repeated ``key=value`` options; a bare ``key`` carries no value."""
    params: list[tuple[str, str | None]] = []
    for item in values or []:
        key, sep, value = item.partition("=")
        params.append((key.strip(), value if sep else None))
    return params
