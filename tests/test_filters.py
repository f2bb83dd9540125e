"""Tests for filter and pagination parsing."""

import pytest

from table_tool.core.exceptions import InvalidArgumentError
from table_tool.core.filters import parse_filters, parse_pagination
from table_tool.core.models import ColumnDescriptor, FilterCondition, FilterOperator

COLUMNS = [
    ColumnDescriptor(name="id", sql_type="integer", nullable=False, is_primary_key=True),
    ColumnDescriptor(name="status", sql_type="text", nullable=True),
    ColumnDescriptor(name="customer_id", sql_type="integer", nullable=False),
    ColumnDescriptor(name="deleted_at", sql_type="timestamp", nullable=True),
]


@pytest.mark.unit
class TestParseFilters:
    def test_structured_key(self):
        conditions = parse_filters({"status__contains": "pend"}, COLUMNS)
        assert conditions == [
            FilterCondition(
                column="status", operator=FilterOperator.CONTAINS, value="pend"
            )
        ]

    def test_legacy_key_means_equals(self):
        conditions = parse_filters({"status": "shipped"}, COLUMNS)
        assert conditions == [
            FilterCondition(
                column="status", operator=FilterOperator.EQUALS, value="shipped"
            )
        ]

    def test_column_name_containing_separator(self):
        columns = [ColumnDescriptor(name="ship__to", sql_type="text", nullable=True)]
        conditions = parse_filters({"ship__to__starts_with": "Ber"}, columns)
        assert len(conditions) == 1
        assert conditions[0].column == "ship__to"
        assert conditions[0].operator == FilterOperator.STARTS_WITH

    def test_legacy_key_for_column_containing_separator(self):
        columns = [ColumnDescriptor(name="ship__to", sql_type="text", nullable=True)]
        conditions = parse_filters({"ship__to": "Berlin"}, columns)
        assert conditions[0].column == "ship__to"
        assert conditions[0].operator == FilterOperator.EQUALS

    def test_unknown_column_dropped(self):
        assert parse_filters({"unknown_col__equals": "x"}, COLUMNS) == []

    def test_unknown_operator_dropped(self):
        assert parse_filters({"status__regex": "p.*"}, COLUMNS) == []

    def test_reserved_keys_skipped(self):
        params = {"page": "2", "pageSize": "10", "status": "x"}
        conditions = parse_filters(params, COLUMNS)
        assert [c.column for c in conditions] == ["status"]

    def test_empty_value_skipped_for_value_operator(self):
        assert parse_filters({"status__contains": ""}, COLUMNS) == []
        assert parse_filters({"status": None}, COLUMNS) == []

    def test_null_checks_ignore_value(self):
        conditions = parse_filters(
            [("deleted_at__is_null", "true"), ("status__is_not_null", None)],
            COLUMNS,
        )
        assert conditions == [
            FilterCondition(column="deleted_at", operator=FilterOperator.IS_NULL),
            FilterCondition(column="status", operator=FilterOperator.IS_NOT_NULL),
        ]
        assert all(c.value is None for c in conditions)

    def test_order_preserved_for_pairs(self):
        conditions = parse_filters(
            [("customer_id", "42"), ("status__ends_with", "ing"), ("id", "5")],
            COLUMNS,
        )
        assert [c.column for c in conditions] == ["customer_id", "status", "id"]

    def test_repeated_key_kept_twice(self):
        conditions = parse_filters(
            [("status__contains", "a"), ("status__contains", "b")], COLUMNS
        )
        assert [c.value for c in conditions] == ["a", "b"]

    def test_operator_is_case_sensitive(self):
        assert parse_filters({"status__CONTAINS": "x"}, COLUMNS) == []


@pytest.mark.unit
class TestParsePagination:
    def test_defaults(self):
        pagination = parse_pagination()
        assert pagination.page == 1
        assert pagination.page_size == 50
        assert pagination.offset == 0

    def test_string_values(self):
        pagination = parse_pagination("3", "20")
        assert pagination.page == 3
        assert pagination.page_size == 20
        assert pagination.offset == 40

    def test_unparsable_values_use_defaults(self):
        pagination = parse_pagination("abc", "many")
        assert pagination.page == 1
        assert pagination.page_size == 50

    def test_custom_default_page_size(self):
        assert parse_pagination(default_page_size=25).page_size == 25

    def test_page_zero_rejected(self):
        with pytest.raises(InvalidArgumentError, match="Invalid page: 0"):
            parse_pagination(0, 10)

    def test_negative_page_size_rejected(self):
        with pytest.raises(InvalidArgumentError, match="Invalid page size: -5"):
            parse_pagination(1, "-5")

    def test_page_size_above_max_rejected(self):
        with pytest.raises(InvalidArgumentError, match="Must not exceed 100"):
            parse_pagination(1, 500, max_page_size=100)

    def test_page_size_at_max_accepted(self):
        assert parse_pagination(1, 100, max_page_size=100).page_size == 100

    def test_offset_beyond_bigint_rejected(self):
        with pytest.raises(InvalidArgumentError, match="out of range"):
            parse_pagination(10**19, 50)

    def test_huge_page_size_rejected_without_max(self):
        with pytest.raises(InvalidArgumentError, match="out of range"):
            parse_pagination(1, 2**63)

    def test_last_addressable_page_accepted(self):
        page = (2**63 - 1) // 50 + 1
        assert parse_pagination(page, 50).offset <= 2**63 - 1
