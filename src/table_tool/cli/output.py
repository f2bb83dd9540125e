"""Choosing the output format and writing formatted lines to stdout."""

from __future__ import annotations

import sys
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable

    from table_tool.formatters.base import Formatter


class OutputFormat(StrEnum):
    TABLE = "table"
    JSON = "json"
    CSV = "csv"


# The one global option each formatter accepts.
_FORMAT_OPTION: dict[str, str] = {
    OutputFormat.TABLE: "width",
    OutputFormat.JSON: "compact",
    OutputFormat.CSV: "no_header",
}


def detect_tty() -> bool:
    return sys.stdout.isatty()


def resolve_format(format_flag: str | None) -> str:
    """--format when given; otherwise table on a terminal and csv in a pipe."""
    if format_flag is not None:
        return format_flag
    return OutputFormat.TABLE if detect_tty() else OutputFormat.CSV


def get_formatter(format_flag: str | None = None, **options: Any) -> Formatter:
    """Formatter for the resolved format, given only the option it understands."""
    # Importing the package registers every formatter.
    from table_tool.formatters import registry

    name = resolve_format(format_flag)
    option = _FORMAT_OPTION.get(name)
    kwargs = {option: options[option]} if option in options else {}
    return registry.get(name, **kwargs)


def write_lines(lines: Iterable[str]) -> None:
    for line in lines:
        sys.stdout.write(line + "\n")
