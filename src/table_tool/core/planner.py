"""Compile filter conditions and pagination into parameterized statements.

Each condition casts its column to text before comparing, so the same
predicate shapes work for any column type:

=============  ==========================  ============
operator       predicate                   bound value
=============  ==========================  ============
equals         ``"col"::text = $n``        ``value``
contains       ``"col"::text ILIKE $n``    ``%value%``
starts_with    ``"col"::text ILIKE $n``    ``value%``
ends_with      ``"col"::text ILIKE $n``    ``%value``
is_null        ``"col" IS NULL``           none
is_not_null    ``"col" IS NOT NULL``       none
=============  ==========================  ============

Identifiers are taken only from the inspected column list and the validated
table name. The planner re-checks every condition column against that list
rather than trusting its caller.

The row and count statements of one request are executed separately and
are not wrapped in a transaction, so a concurrent write between them can
make ``total`` disagree with the page content by that write.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from table_tool.core.catalog import (
    is_known_column,
    primary_key_column,
    qualified_table,
    quote_ident,
)
from table_tool.core.exceptions import InvalidArgumentError, SchemaViolationError
from table_tool.core.models import FilterOperator, QueryPlan

if TYPE_CHECKING:
    from collections.abc import Sequence

    from table_tool.core.models import ColumnDescriptor, FilterCondition, Pagination

# operator -> (comparison, bound value template); null checks bind nothing.
_COMPARISONS: dict[FilterOperator, tuple[str, str]] = {
    FilterOperator.EQUALS: ("=", "{}"),
    FilterOperator.CONTAINS: ("ILIKE", "%{}%"),
    FilterOperator.STARTS_WITH: ("ILIKE", "{}%"),
    FilterOperator.ENDS_WITH: ("ILIKE", "%{}"),
}

_NULL_CHECKS: dict[FilterOperator, str] = {
    FilterOperator.IS_NULL: "IS NULL",
    FilterOperator.IS_NOT_NULL: "IS NOT NULL",
}


def build_predicate(
    condition: FilterCondition, position: int
) -> tuple[str, Any | None]:
    """Predicate text for one condition and its bound value.

    ``position`` is the placeholder number to use if a value is bound.
    """
    column = quote_ident(condition.column)
    if condition.operator in _NULL_CHECKS:
        return f"{column} {_NULL_CHECKS[condition.operator]}", None

    comparison, template = _COMPARISONS[condition.operator]
    return (
        f"{column}::text {comparison} ${position}",
        template.format(condition.value or ""),
    )


def build_where(
    columns: Sequence[ColumnDescriptor], conditions: Sequence[FilterCondition]
) -> tuple[str, tuple[Any, ...]]:
    """Conjoin conditions in order. Returns (where_clause, bound_values)."""
    predicates: list[str] = []
    values: list[Any] = []
    for condition in conditions:
        if not is_known_column(columns, condition.column):
            raise SchemaViolationError(
                f"Unknown column in filter: {condition.column}",
            )
        predicate, value = build_predicate(condition, len(values) + 1)
        predicates.append(predicate)
        if value is not None:
            values.append(value)
    return " AND ".join(predicates), tuple(values)


def plan_select(
    schema: str,
    table: str,
    columns: Sequence[ColumnDescriptor],
    conditions: Sequence[FilterCondition],
    pagination: Pagination,
) -> tuple[QueryPlan, QueryPlan]:
    """Build the row-fetch plan and the matching count plan."""
    where_clause, values = build_where(columns, conditions)
    target = qualified_table(schema, table)
    where_sql = f" WHERE {where_clause}" if where_clause else ""

    pk = primary_key_column(columns)
    order_sql = f" ORDER BY {quote_ident(pk)}" if pk else ""

    limit = int(pagination.page_size)
    offset = int(pagination.offset)
    select_plan = QueryPlan(
        statement=(
            f"SELECT * FROM {target}{where_sql}{order_sql}"
            f" LIMIT {limit} OFFSET {offset}"
        ),
        where_clause=where_clause,
        bound_values=values,
        limit=limit,
        offset=offset,
    )
    count_plan = QueryPlan(
        statement=f"SELECT COUNT(*) AS total FROM {target}{where_sql}",
        where_clause=where_clause,
        bound_values=values,
    )
    return select_plan, count_plan


def plan_delete(
    schema: str,
    table: str,
    columns: Sequence[ColumnDescriptor],
    pk_column: str,
    ids: Sequence[str | int],
) -> QueryPlan:
    """Build ``DELETE ... WHERE <pk> IN ($1, ..., $n)`` with ids in caller order.

    Ids are bound as text so the server coerces them to the key column's
    type; an int bound as int8 would not compare against a varchar key.
    """
    if not ids:
        raise InvalidArgumentError("At least one id is required")
    if not is_known_column(columns, pk_column):
        raise SchemaViolationError(f"Unknown primary key column: {pk_column}")

    placeholders = ", ".join(f"${i}" for i in range(1, len(ids) + 1))
    where_clause = f"{quote_ident(pk_column)} IN ({placeholders})"
    return QueryPlan(
        statement=f"DELETE FROM {qualified_table(schema, table)} WHERE {where_clause}",
        where_clause=where_clause,
        bound_values=tuple(str(i) for i in ids),
    )
