"""JSON formatter: one array of objects keyed by column name."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from table_tool.formatters.base import registry, render_json

if TYPE_CHECKING:
    from collections.abc import Iterator

    from table_tool.core.models import QueryResult


@registry.register("json")
class JSONFormatter:
    def __init__(self, compact: bool = False) -> None:
        self.compact = compact

    def format(self, result: QueryResult) -> Iterator[str]:
        names = [col.name for col in result.columns]
        records = [dict(zip(names, row, strict=True)) for row in result.rows]
        # render_json only sees values json cannot encode natively.
        yield json.dumps(
            records, indent=None if self.compact else 2, default=render_json
        )
