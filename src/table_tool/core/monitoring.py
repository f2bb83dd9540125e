"""Sentry integration for error tracking and performance monitoring.

Sentry is initialized early in main() after logging setup, and only when
a DSN is provided through the environment.
"""

import os

import sentry_sdk

from table_tool.__about__ import __version__

SENTRY_DSN_ENV = "TABLE_TOOL_SENTRY_DSN"


def setup_sentry(environment: str | None = None) -> bool:
    """Initialize Sentry when TABLE_TOOL_SENTRY_DSN is set.

    Returns True if Sentry was initialized.
    """
    dsn = os.environ.get(SENTRY_DSN_ENV)
    if not dsn:
        return False

    sentry_sdk.init(
        dsn=dsn,
        traces_sample_rate=0.03,
        environment=environment or os.environ.get("TABLE_TOOL_ENV", "local"),
        release=__version__,
        attach_stacktrace=True,
        send_default_pii=False,
    )
    return True
