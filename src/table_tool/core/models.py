"""Data models for Table Tool.

Pydantic models for executed statement results, inspected table schemas,
filter conditions, compiled query plans and the pages returned to callers.
Everything here is request-scoped: built from the live catalog, used for
one statement pair (or one delete), then discarded.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ColumnMeta(BaseModel):
    """Metadata for a single result column."""

    name: str
    type_oid: int
    type_name: str


class QueryResult(BaseModel):
    """Result of a single executed statement."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    columns: list[ColumnMeta]
    rows: list[tuple[Any, ...]]
    row_count: int
    status_message: str
    affected_rows: int = 0


class ColumnDescriptor(BaseModel):
    """One column of an inspected table, in ordinal position order."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    name: str
    sql_type: str
    nullable: bool
    is_primary_key: bool = False


class FilterOperator(StrEnum):
    EQUALS = "equals"
    CONTAINS = "contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    IS_NULL = "is_null"
    IS_NOT_NULL = "is_not_null"

    @property
    def requires_value(self) -> bool:
        return self not in (FilterOperator.IS_NULL, FilterOperator.IS_NOT_NULL)


class FilterCondition(BaseModel):
    """A single predicate requested by the caller, already checked against the schema."""

    model_config = ConfigDict(frozen=True)

    column: str
    operator: FilterOperator
    value: str | None = None


class QueryPlan(BaseModel):
    """A compiled, parameterized statement.

    ``where_clause`` holds the predicate text without the WHERE keyword so
    that the row and count plans of one request can be compared directly.
    Placeholders are PostgreSQL native ``$1..$n``.
    """

    model_config = ConfigDict(frozen=True)

    statement: str
    where_clause: str = ""
    bound_values: tuple[Any, ...] = ()
    limit: int | None = None
    offset: int | None = None


class Pagination(BaseModel):
    model_config = ConfigDict(frozen=True)

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=50, gt=0)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


class TablePage(BaseModel):
    """One page of filtered rows, reported together with the filtered total."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    columns: list[ColumnDescriptor]
    rows: list[dict[str, Any]]
    total: int
    page: int
    page_size: int

    @property
    def page_count(self) -> int:
        if self.total == 0:
            return 1
        return -(-self.total // self.page_size)


class DeleteResult(BaseModel):
    deleted: int
