"""table-tool: browse, filter and delete rows in arbitrary PostgreSQL tables."""

from table_tool.__about__ import __version__

__all__ = ["__version__"]
