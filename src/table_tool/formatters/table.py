"""Rich table formatter for terminals."""

from __future__ import annotations

import shutil
from io import StringIO
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table
from rich.text import Text

from table_tool.formatters.base import registry, render_text

if TYPE_CHECKING:
    from collections.abc import Iterator
    from typing import Any

    from table_tool.core.models import ColumnMeta, QueryResult

_NO_RESULTS = "No results"
_NULL = Text("NULL", style="dim")

# Driver type names (int4, ...) and catalog data_type names (integer, ...).
_NUMERIC_TYPES = frozenset(
    {
        "int2",
        "int4",
        "int8",
        "float4",
        "float8",
        "numeric",
        "smallint",
        "integer",
        "bigint",
        "real",
        "double precision",
    }
)


def _truncate(value: str, width: int) -> str:
    value = value.replace("\n", " ")
    if len(value) <= width:
        return value
    return value[: width - 1] + "…"


def _cell(value: Any, width: int) -> Text | str:
    if value is None:
        return _NULL
    return _truncate(render_text(value), width)


def _justify(col: ColumnMeta) -> str:
    return "right" if col.type_name in _NUMERIC_TYPES else "left"


@registry.register("table")
class TableFormatter:
    def __init__(self, width: int = 40) -> None:
        self.width = width

    def format(self, result: QueryResult) -> Iterator[str]:
        if not result.rows:
            yield _NO_RESULTS
            return

        table = Table(show_edge=True, pad_edge=True)
        for col in result.columns:
            table.add_column(col.name, justify=_justify(col), no_wrap=True)
        for row in result.rows:
            table.add_row(*(_cell(v, self.width) for v in row))

        buf = StringIO()
        console = Console(
            file=buf,
            force_terminal=True,
            width=shutil.get_terminal_size((120, 24)).columns,
        )
        console.print(table)
        yield buf.getvalue().rstrip("\n")
