"""Catalog introspection and identifier validation.

Table and column names cannot be sent as bound parameters, so every name
that ends up in generated SQL text must first be found in a catalog-derived
allow-list fetched during the same request. The functions here are that
allow-list: base tables of the working schema, and the column descriptors
of one table. Nothing is cached; each call reads the live catalog.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from table_tool.core.exceptions import NotFoundError
from table_tool.core.models import ColumnDescriptor

if TYPE_CHECKING:
    from collections.abc import Iterable

    from table_tool.core.client import PgClient

_BASE_TABLES_SQL = """
SELECT table_name
FROM information_schema.tables
WHERE table_schema = $1
  AND table_type = 'BASE TABLE'
ORDER BY table_name
"""

_TABLE_EXISTS_SQL = """
SELECT 1
FROM information_schema.tables
WHERE table_schema = $1
  AND table_type = 'BASE TABLE'
  AND table_name = $2
"""

_COLUMNS_SQL = """
SELECT column_name, data_type, is_nullable
FROM information_schema.columns
WHERE table_schema = $1
  AND table_name = $2
ORDER BY ordinal_position
"""

_PRIMARY_KEY_SQL = """
SELECT a.attname
FROM pg_catalog.pg_index i
JOIN pg_catalog.pg_attribute a
  ON a.attrelid = i.indrelid AND a.attnum = ANY(i.indkey)
JOIN pg_catalog.pg_class c ON c.oid = i.indrelid
JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace
WHERE i.indisprimary
  AND n.nspname = $1
  AND c.relname = $2
"""


def quote_ident(name: str) -> str:
    """Double-quote an identifier that already passed an allow-list check."""
    return '"' + name.replace('"', '""') + '"'


def qualified_table(schema: str, table: str) -> str:
    return f"{quote_ident(schema)}.{quote_ident(table)}"


def list_base_tables(client: PgClient, schema: str) -> list[str]:
    """Base tables of the working schema in alphabetical order (no views)."""
    result = client.execute(_BASE_TABLES_SQL, [schema])
    return [row[0] for row in result.rows]


def is_known_table(client: PgClient, schema: str, name: str) -> bool:
    result = client.execute(_TABLE_EXISTS_SQL, [schema, name])
    return bool(result.rows)


def is_known_column(columns: Iterable[ColumnDescriptor], name: str) -> bool:
    return any(col.name == name for col in columns)


def primary_key_columns(client: PgClient, schema: str, table: str) -> list[str]:
    """All columns of the table's primary-key index (more than one if composite)."""
    result = client.execute(_PRIMARY_KEY_SQL, [schema, table])
    return [row[0] for row in result.rows]


def inspect_table(client: PgClient, schema: str, table: str) -> list[ColumnDescriptor]:
    """Load the column descriptors of ``table`` in ordinal position order.

    Raises NotFoundError when ``table`` is not a base table of ``schema``.
    A composite primary key leaves every column unflagged, since deleting by
    id needs a single key column.
    """
    log = structlog.get_logger()
    if not is_known_table(client, schema, table):
        log.debug("table not in catalog", schema=schema, table=table)
        raise NotFoundError(f"Table not found: {table}")

    columns_result = client.execute(_COLUMNS_SQL, [schema, table])
    pk_columns = primary_key_columns(client, schema, table)
    if len(pk_columns) > 1:
        log.debug("composite primary key ignored", table=table, columns=pk_columns)
    pk_name = pk_columns[0] if len(pk_columns) == 1 else None

    columns = [
        ColumnDescriptor(
            name=name,
            sql_type=data_type,
            nullable=is_nullable == "YES",
            is_primary_key=name == pk_name,
        )
        for name, data_type, is_nullable in columns_result.rows
    ]
    log.debug(
        "inspected table",
        table=table,
        column_count=len(columns),
        primary_key=pk_name,
    )
    return columns


def primary_key_column(columns: Iterable[ColumnDescriptor]) -> str | None:
    for col in columns:
        if col.is_primary_key:
            return col.name
    return None
