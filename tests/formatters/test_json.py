"""Tests for JSONFormatter."""

import json
from datetime import UTC, datetime
from decimal import Decimal

import pytest

from table_tool.core.models import ColumnMeta, QueryResult
from table_tool.formatters.base import Formatter
from table_tool.formatters.json import JSONFormatter


def _make_result(rows=None, columns=None):
    if columns is None:
        columns = [
            ColumnMeta(name="id", type_oid=23, type_name="int4"),
            ColumnMeta(name="status", type_oid=25, type_name="text"),
        ]
    if rows is None:
        rows = [(5, "pending"), (9, "shipped")]
    return QueryResult(
        columns=columns,
        rows=rows,
        row_count=len(rows),
        status_message=f"SELECT {len(rows)}",
    )


@pytest.mark.unit
def test_json_formatter_implements_protocol():
    assert isinstance(JSONFormatter(), Formatter)


@pytest.mark.unit
def test_json_formatter_rows_as_dicts():
    output = "\n".join(JSONFormatter().format(_make_result()))
    assert json.loads(output) == [
        {"id": 5, "status": "pending"},
        {"id": 9, "status": "shipped"},
    ]


@pytest.mark.unit
def test_json_formatter_pretty_print_default():
    output = "\n".join(JSONFormatter().format(_make_result(rows=[(1, "a")])))
    assert "\n" in output
    assert "  " in output


@pytest.mark.unit
def test_json_formatter_compact_mode():
    output = "\n".join(JSONFormatter(compact=True).format(_make_result(rows=[(1, "a")])))
    assert json.loads(output) == [{"id": 1, "status": "a"}]
    assert "\n" not in output


@pytest.mark.unit
def test_json_formatter_empty_result():
    output = "\n".join(JSONFormatter().format(_make_result(rows=[])))
    assert json.loads(output) == []


@pytest.mark.unit
def test_json_formatter_handles_none_values():
    output = "\n".join(JSONFormatter().format(_make_result(rows=[(1, None)])))
    assert json.loads(output)[0]["status"] is None


@pytest.mark.unit
def test_json_formatter_handles_special_types():
    result = _make_result(
        rows=[(datetime(2024, 1, 15, 10, 30, tzinfo=UTC), Decimal("123.45"), b"\x00")],
        columns=[
            ColumnMeta(name="ts", type_oid=1184, type_name="timestamptz"),
            ColumnMeta(name="amount", type_oid=1700, type_name="numeric"),
            ColumnMeta(name="blob", type_oid=17, type_name="bytea"),
        ],
    )
    parsed = json.loads("\n".join(JSONFormatter().format(result)))
    assert parsed[0] == {
        "ts": "2024-01-15T10:30:00+00:00",
        "amount": "123.45",
        "blob": "AA==",
    }
