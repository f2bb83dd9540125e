"""Tests for exception hierarchy."""

import pytest

from table_tool.core.exceptions import (
    BackendUnavailableError,
    ConfigError,
    InvalidArgumentError,
    NoPrimaryKeyError,
    NotFoundError,
    SchemaViolationError,
    TableToolError,
    TimeoutError,
)
from table_tool.core.exit_codes import ExitCode


@pytest.mark.unit
class TestExitCodes:
    def test_exit_code_values(self):
        assert ExitCode.SUCCESS == 0
        assert ExitCode.GENERAL_ERROR == 1
        assert ExitCode.USAGE_ERROR == 2
        assert ExitCode.INPUT_ERROR == 3
        assert ExitCode.OUTPUT_ERROR == 4
        assert ExitCode.NETWORK_ERROR == 5
        assert ExitCode.TIMEOUT == 6
        assert ExitCode.CONFIG_ERROR == 7
        assert ExitCode.NOT_FOUND == 8
        assert ExitCode.SCHEMA_VIOLATION == 9
        assert ExitCode.NO_PRIMARY_KEY == 10

    def test_exit_code_is_int(self):
        for code in ExitCode:
            assert isinstance(code, int)


@pytest.mark.unit
class TestTableToolError:
    def test_base_exception(self):
        err = TableToolError("test error")
        assert str(err) == "test error"
        assert err.message == "test error"
        assert err.exit_code == ExitCode.GENERAL_ERROR

    def test_internal_details_default_to_message(self):
        assert TableToolError("boom").internal_details == "boom"

    def test_internal_details_kept_apart(self):
        err = TableToolError("Database error", internal_details="SELECT 1 -- oops")
        assert str(err) == "Database error"
        assert err.internal_details == "SELECT 1 -- oops"

    def test_is_exception(self):
        assert issubclass(TableToolError, Exception)


@pytest.mark.unit
class TestEngineErrors:
    @pytest.mark.parametrize(
        ("exc_class", "code"),
        [
            (NotFoundError, ExitCode.NOT_FOUND),
            (SchemaViolationError, ExitCode.SCHEMA_VIOLATION),
            (NoPrimaryKeyError, ExitCode.NO_PRIMARY_KEY),
            (InvalidArgumentError, ExitCode.INPUT_ERROR),
            (BackendUnavailableError, ExitCode.NETWORK_ERROR),
            (TimeoutError, ExitCode.TIMEOUT),
            (ConfigError, ExitCode.CONFIG_ERROR),
        ],
    )
    def test_exit_code(self, exc_class, code):
        assert exc_class("x").exit_code == code

    def test_timeout_is_backend_unavailable(self):
        err = TimeoutError("query timed out")
        assert isinstance(err, BackendUnavailableError)
        assert isinstance(err, TableToolError)


@pytest.mark.unit
class TestExceptionCatching:
    def test_catch_all_by_base(self):
        """All specific exceptions are caught by TableToolError."""
        for exc_class in [
            NotFoundError,
            SchemaViolationError,
            NoPrimaryKeyError,
            InvalidArgumentError,
            BackendUnavailableError,
            TimeoutError,
            ConfigError,
        ]:
            with pytest.raises(TableToolError):
                raise exc_class("test")

    def test_timeout_caught_by_backend_handler(self):
        with pytest.raises(BackendUnavailableError):
            raise TimeoutError("timeout")
