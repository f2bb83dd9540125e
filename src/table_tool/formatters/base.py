"""Formatter protocol, registry and shared value rendering."""

from __future__ import annotations

import base64
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from table_tool.core.models import QueryResult

_F = TypeVar("_F")


@runtime_checkable
class Formatter(Protocol):
    """Protocol for output formatters.

    Each formatter transforms a QueryResult into lines of formatted text.
    """

    def format(self, result: QueryResult) -> Iterator[str]:
        """Transform a QueryResult into formatted output lines."""
        ...


class FormatterRegistry:
    """Registry for looking up formatters by name."""

    def __init__(self) -> None:
        self._formatters: dict[str, type[Formatter]] = {}

    def register(self, name: str) -> Callable[[_F], _F]:
        """Class decorator registering a formatter under ``name``."""

        def decorator(formatter_class: _F) -> _F:
            self._formatters[name] = formatter_class  # type: ignore[assignment]
            return formatter_class

        return decorator

    def get(self, name: str, **kwargs: object) -> Formatter:
        """Return a formatter instance by name.

        Raises KeyError if the format name is not registered.
        """
        if name not in self._formatters:
            available = ", ".join(sorted(self._formatters))
            msg = f"Unknown format {name!r}. Available: {available}"
            raise KeyError(msg)
        return self._formatters[name](**kwargs)

    @property
    def available(self) -> list[str]:
        return sorted(self._formatters)


def render_text(value: Any) -> str:
    """Plain-text rendering of a cell value; NULL becomes an empty string."""
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return "\\x" + bytes(value).hex()
    return str(value)


def render_json(value: Any) -> Any:
    """JSON-safe rendering of a cell value."""
    if isinstance(value, (int, float, str, bool, type(None))):
        return value
    if isinstance(value, (list, dict)):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


# Global registry instance populated by formatter modules.
registry = FormatterRegistry()
