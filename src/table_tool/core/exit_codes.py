"""Standard exit codes for Table Tool.

Codes 0-7 follow Unix conventions; 8 and up report engine outcomes
that a calling script may want to tell apart.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for Table Tool commands."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    USAGE_ERROR = 2
    INPUT_ERROR = 3
    OUTPUT_ERROR = 4
    NETWORK_ERROR = 5
    TIMEOUT = 6
    CONFIG_ERROR = 7
    NOT_FOUND = 8
    SCHEMA_VIOLATION = 9
    NO_PRIMARY_KEY = 10
