"""Exception hierarchy for Table Tool.

All exceptions carry an exit_code for CLI return value mapping, and keep
the user-facing message apart from internal details (SQL text, driver
messages) that only go to logs and Sentry.
"""

from table_tool.core.exit_codes import ExitCode


class TableToolError(Exception):
    """Base exception for all Table Tool errors."""

    exit_code: int = ExitCode.GENERAL_ERROR

    def __init__(self, message: str, internal_details: str = "") -> None:
        self.message = message
        self.internal_details = internal_details or message
        super().__init__(message)


class NotFoundError(TableToolError):
    """Table absent from the working schema's base-table catalog."""

    exit_code: int = ExitCode.NOT_FOUND


class SchemaViolationError(TableToolError):
    """A filter or delete references a column the table does not have."""

    exit_code: int = ExitCode.SCHEMA_VIOLATION


class NoPrimaryKeyError(TableToolError):
    """Delete requested on a keyless or composite-keyed table."""

    exit_code: int = ExitCode.NO_PRIMARY_KEY


class InvalidArgumentError(TableToolError):
    """Empty id list, malformed pagination."""

    exit_code: int = ExitCode.INPUT_ERROR


class BackendUnavailableError(TableToolError):
    """Connection refused, pool exhausted, or any failed statement."""

    exit_code: int = ExitCode.NETWORK_ERROR


class TimeoutError(BackendUnavailableError):
    """Statement cancelled by the server-side statement timeout."""

    exit_code: int = ExitCode.TIMEOUT


class ConfigError(TableToolError):
    """Malformed config, missing profile, no connection string."""

    exit_code: int = ExitCode.CONFIG_ERROR
