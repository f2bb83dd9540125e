"""CSV formatter for QueryResult output (RFC 4180 compliant)."""

from __future__ import annotations

import csv
from io import StringIO
from typing import TYPE_CHECKING

from table_tool.formatters.base import registry, render_text

if TYPE_CHECKING:
    from collections.abc import Iterator

    from table_tool.core.models import QueryResult


def _write_record(values: list[str]) -> str:
    buf = StringIO()
    csv.writer(buf, lineterminator="\n").writerow(values)
    return buf.getvalue().removesuffix("\n")


@registry.register("csv")
class CSVFormatter:
    def __init__(self, no_header: bool = False) -> None:
        self.no_header = no_header

    def format(self, result: QueryResult) -> Iterator[str]:
        if not self.no_header:
            yield _write_record([col.name for col in result.columns])

        for row in result.rows:
            yield _write_record([render_text(v) for v in row])
