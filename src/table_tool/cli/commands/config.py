"""Configuration inspection commands.

Both commands render through the regular formatters, so ``--format json``
works for scripts that need the resolved settings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from table_tool.cli.commands._shared import get_config, output_result
from table_tool.core.config import DEFAULT_CONFIG_PATH, load_config, mask_dsn
from table_tool.core.models import ColumnMeta, QueryResult

if TYPE_CHECKING:
    from pathlib import Path

    from table_tool.core.config import ResolvedConfig

config_app = typer.Typer(help="Configuration management commands")


def _text_columns(*names: str) -> list[ColumnMeta]:
    return [ColumnMeta(name=name, type_oid=25, type_name="text") for name in names]


def _settings(resolved: ResolvedConfig) -> list[tuple[str, str, str]]:
    """(setting, value, source) for every resolved field worth showing."""
    sources = resolved.sources
    return [
        ("dsn", resolved.masked_dsn, sources["dsn"]),
        ("schema", resolved.schema_name, sources["schema_name"]),
        (
            "statement_timeout",
            f"{resolved.statement_timeout}s",
            sources["statement_timeout"],
        ),
        ("application_name", resolved.application_name, sources["application_name"]),
        (
            "pool_size",
            f"{resolved.pool_min_size}-{resolved.pool_max_size}",
            sources["pool_max_size"],
        ),
        (
            "default_page_size",
            str(resolved.default_page_size),
            sources["default_page_size"],
        ),
        ("max_page_size", str(resolved.max_page_size), sources["max_page_size"]),
        ("profile", resolved.active_profile or "none", sources["active_profile"]),
    ]


@config_app.callback(invoke_without_command=True)
def config_callback(ctx: typer.Context) -> None:
    if not ctx.invoked_subcommand:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Display resolved configuration and where each value came from."""
    rows = _settings(get_config(ctx))
    config_path: Path | None = ctx.obj.get("config_file")
    rows.append(("config_file", str(config_path or DEFAULT_CONFIG_PATH), "--config"))
    output_result(
        ctx,
        QueryResult(
            columns=_text_columns("setting", "value", "source"),
            rows=rows,
            row_count=len(rows),
            status_message=f"SELECT {len(rows)}",
        ),
    )


@config_app.command("profiles")
def config_profiles(ctx: typer.Context) -> None:
    """List connection profiles from the config file; the active one is marked."""
    config_path: Path | None = ctx.obj.get("config_file")
    app_config = load_config(config_path)
    if not app_config.profiles:
        typer.echo("No profiles configured.", err=True)
        typer.echo(f"Add profiles to: {config_path or DEFAULT_CONFIG_PATH}", err=True)
        return

    active = ctx.obj.get("profile") or app_config.default_profile
    rows = [
        (
            name,
            "*" if name == active else "",
            mask_dsn(profile.dsn) if profile.dsn else "not set",
            profile.schema_name,
        )
        for name, profile in sorted(app_config.profiles.items())
    ]
    output_result(
        ctx,
        QueryResult(
            columns=_text_columns("profile", "active", "dsn", "schema"),
            rows=rows,
            row_count=len(rows),
            status_message=f"SELECT {len(rows)}",
        ),
    )
