"""Output formatters for Table Tool."""

from table_tool.formatters.base import Formatter, FormatterRegistry, registry
from table_tool.formatters.csv import CSVFormatter
from table_tool.formatters.json import JSONFormatter
from table_tool.formatters.table import TableFormatter

__all__ = [
    "CSVFormatter",
    "Formatter",
    "FormatterRegistry",
    "JSONFormatter",
    "TableFormatter",
    "registry",
]
