"""structlog setup for Table Tool.

Everything is logged to stderr so stdout only carries command output.
Console rendering is the default; ``json_logs`` switches to one JSON object
per line for log shippers. Every event carries the running command once
bind_command() has been called.
"""

import logging
import sys
from typing import Any

import structlog


def _stderr_logger(*args: Any) -> structlog.PrintLogger:
    # Looked up per logger, not once at configure() time: CliRunner swaps
    # sys.stderr between invocations.
    return structlog.PrintLogger(file=sys.stderr)


def setup_logging(verbose: bool = False, json_logs: bool = False) -> None:
    """Configure structlog.

    Args:
        verbose: Emit DEBUG events (catalog lookups, generated statements).
            Otherwise INFO and above.
        json_logs: Render each event as a JSON object instead of the
            human-readable console format.
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_logs:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.INFO
        ),
        context_class=dict,
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


def bind_command(command: str | None) -> None:
    """Attach the invoked command name to every subsequent event."""
    structlog.contextvars.clear_contextvars()
    if command:
        structlog.contextvars.bind_contextvars(command=command)


def get_logger(name: str | None = None) -> Any:
    """structlog logger, bound with ``logger=name`` when given.

    Call inside functions, after setup_logging(), never at import time.
    """
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger
