"""Table Tool main entry point and command registration.

run() is the boundary where engine errors end: each TableToolError becomes
``Error: <message>`` on stderr and the error's exit code. Internal details
(SQL text, driver messages) only reach the debug log and Sentry.
"""

from __future__ import annotations

from pathlib import Path  # noqa: TC003
from typing import Annotated, NoReturn

import sentry_sdk
import typer

from table_tool.__about__ import __version__
from table_tool.cli.commands.config import config_app
from table_tool.cli.commands.tables import (
    delete_command,
    describe_command,
    rows_command,
    tables_command,
)
from table_tool.cli.output import OutputFormat  # noqa: TC001
from table_tool.core.exceptions import TableToolError
from table_tool.core.exit_codes import ExitCode
from table_tool.core.logging import bind_command, get_logger, setup_logging
from table_tool.core.monitoring import setup_sentry

app = typer.Typer(
    help="Table Tool - browse, filter and delete rows in PostgreSQL tables",
    no_args_is_help=True,
)

app.add_typer(config_app, name="config")
app.command("tables")(tables_command)
app.command("describe")(describe_command)
app.command("rows")(rows_command)
app.command("delete")(delete_command)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"table-tool {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log catalog lookups and generated SQL"),
    ] = False,
    json_logs: Annotated[
        bool,
        typer.Option("--json-logs", help="Write logs to stderr as JSON lines"),
    ] = False,
    profile: Annotated[
        str | None,
        typer.Option("--profile", "-P", help="Named connection profile"),
    ] = None,
    dsn: Annotated[
        str | None,
        typer.Option("--dsn", help="Connection string (overrides DATABASE_URL)"),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config file"),
    ] = None,
    schema: Annotated[
        str | None,
        typer.Option("--schema", "-s", help="Working schema (default: public)"),
    ] = None,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", "-t", help="Statement timeout in seconds"),
    ] = None,
    format: Annotated[
        OutputFormat | None,
        typer.Option("--format", "-f", help="Output format: table|json|csv"),
    ] = None,
    table: Annotated[
        bool,
        typer.Option("--table", help="Shorthand for --format table"),
    ] = False,
    compact: Annotated[
        bool,
        typer.Option("--compact", help="Compact JSON output (no indentation)"),
    ] = False,
    width: Annotated[
        int,
        typer.Option("--width", help="Column width for table format"),
    ] = 40,
    no_header: Annotated[
        bool,
        typer.Option("--no-header", help="Suppress header row in CSV output"),
    ] = False,
) -> None:
    """Table Tool - browse, filter and delete rows in PostgreSQL tables."""
    command = ctx.invoked_subcommand or "table-tool"
    setup_logging(verbose, json_logs=json_logs)
    bind_command(command)
    if setup_sentry():
        # Finished when the root context closes, after the command returns
        # or raises.
        ctx.with_resource(
            sentry_sdk.start_transaction(op="cli", name=f"table-tool {command}")
        )
        ctx.call_on_close(lambda: sentry_sdk.flush(timeout=2))

    ctx.ensure_object(dict).update(
        verbose=verbose,
        profile=profile,
        dsn=dsn,
        config_file=config_file,
        schema=schema,
        timeout=timeout,
        format="table" if table else (format.value if format else None),
        compact=compact,
        width=width,
        no_header=no_header,
    )


def _fail(message: str, code: int) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise SystemExit(code)


def run() -> None:
    """Console entry point: maps every failure to a message and exit code."""
    try:
        app()
    except TableToolError as e:
        sentry_sdk.capture_exception(e)
        get_logger(__name__).debug(
            "command failed", error=type(e).__name__, details=e.internal_details
        )
        _fail(e.message, e.exit_code)
    except SystemExit:
        raise
    except KeyboardInterrupt:
        raise SystemExit(130) from None
    except Exception as e:
        sentry_sdk.capture_exception(e)
        get_logger(__name__).error("unexpected failure", error=repr(e))
        _fail("An unexpected error occurred", ExitCode.GENERAL_ERROR)
