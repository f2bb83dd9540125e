"""Request parameter parsing: filter conditions and pagination.

Filters arrive as flat key/value pairs. Two key encodings are accepted:

* ``<column>__<operator>``, e.g. ``status__contains=pend``
* ``<column>``, the legacy form, meaning ``<column>__equals``

Keys that name no known column or operator are dropped, never forwarded.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

import structlog

from table_tool.core.exceptions import InvalidArgumentError
from table_tool.core.models import FilterCondition, FilterOperator, Pagination

if TYPE_CHECKING:
    from collections.abc import Sequence

    from table_tool.core.models import ColumnDescriptor

RESERVED_KEYS = frozenset({"page", "pageSize"})
OPERATOR_SEPARATOR = "__"
DEFAULT_PAGE_SIZE = 50
# LIMIT and OFFSET are bigint on the server.
MAX_ROW_OFFSET = 2**63 - 1
_OPERATORS = frozenset(op.value for op in FilterOperator)

RawParams = Mapping[str, str | None] | Iterable[tuple[str, str | None]]


def _items(raw_params: RawParams) -> Iterable[tuple[str, str | None]]:
    if isinstance(raw_params, Mapping):
        return raw_params.items()
    return raw_params


def _split_key(key: str, column_names: set[str]) -> tuple[str, FilterOperator] | None:
    column, sep, op = key.rpartition(OPERATOR_SEPARATOR)
    if sep and column in column_names and op in _OPERATORS:
        return column, FilterOperator(op)
    if key in column_names:
        return key, FilterOperator.EQUALS
    return None


def parse_filters(
    raw_params: RawParams, columns: Sequence[ColumnDescriptor]
) -> list[FilterCondition]:
    """Turn request parameters into filter conditions, in supplied order."""
    log = structlog.get_logger()
    column_names = {col.name for col in columns}
    conditions: list[FilterCondition] = []

    for key, value in _items(raw_params):
        if key in RESERVED_KEYS:
            continue
        parsed = _split_key(key, column_names)
        if parsed is None:
            log.debug("ignoring unknown filter key", key=key)
            continue
        column, operator = parsed
        if operator.requires_value:
            if not value:
                continue
            conditions.append(
                FilterCondition(column=column, operator=operator, value=value)
            )
        else:
            conditions.append(FilterCondition(column=column, operator=operator))

    return conditions


def _parse_int(raw: int | str | None) -> int | None:
    if raw is None or isinstance(raw, int):
        return raw
    try:
        return int(raw.strip())
    except ValueError:
        return None


def parse_pagination(
    page: int | str | None = None,
    page_size: int | str | None = None,
    *,
    default_page_size: int = DEFAULT_PAGE_SIZE,
    max_page_size: int | None = None,
) -> Pagination:
    """Parse page and page size.

    Absent or unparsable values fall back to page 1 and the default page
    size. Parsed values out of range raise InvalidArgumentError instead of
    being clamped.
    """
    page_num = _parse_int(page)
    size = _parse_int(page_size)
    if page_num is None:
        page_num = 1
    if size is None:
        size = default_page_size

    if page_num < 1:
        msg = f"Invalid page: {page_num}. Must be 1 or greater"
        raise InvalidArgumentError(msg)
    if size <= 0:
        msg = f"Invalid page size: {size}. Must be greater than 0"
        raise InvalidArgumentError(msg)
    if max_page_size is not None and size > max_page_size:
        msg = f"Invalid page size: {size}. Must not exceed {max_page_size}"
        raise InvalidArgumentError(msg)
    if size > MAX_ROW_OFFSET or (page_num - 1) * size > MAX_ROW_OFFSET:
        msg = f"Invalid page: {page_num}. Row offset is out of range for page size {size}"
        raise InvalidArgumentError(msg)

    return Pagination(page=page_num, page_size=size)
