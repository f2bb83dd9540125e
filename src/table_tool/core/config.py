"""Configuration management for Table Tool.

The engine needs exactly one connection string plus a handful of knobs
(working schema, statement timeout, pool size, page size limits). They are
read from a TOML config file with named profiles, environment variables and
CLI flags.

Precedence order (highest to lowest):
1. CLI flags (--schema, --timeout)
2. --dsn flag
3. Environment variables (DATABASE_URL, TABLE_TOOL_SCHEMA)
4. Named profile (--profile or TABLE_TOOL_PROFILE env var)
5. Config file defaults
6. Built-in defaults

A missing connection string is a ConfigError raised once, when the process
resolves its configuration, never on a per-request basis.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from pydantic import (
    BaseModel,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)

from table_tool.core.exceptions import ConfigError

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "table-tool" / "config.toml"

_ENV_VARS: dict[str, str] = {
    "DATABASE_URL": "dsn",
    "TABLE_TOOL_SCHEMA": "schema_name",
}

_DEFAULTS: dict[str, Any] = {
    "dsn": None,
    "schema_name": "public",
    "statement_timeout": 30.0,
    "application_name": "table-tool",
    "pool_min_size": 1,
    "pool_max_size": 4,
    "default_page_size": 50,
    "max_page_size": 1000,
}


def check_dsn(dsn: str) -> None:
    """Reject anything but a postgresql:// or postgres:// URL with a numeric port."""
    parsed = urlparse(dsn)
    if parsed.scheme not in ("postgresql", "postgres"):
        msg = f"Invalid DSN scheme: '{parsed.scheme}'. Expected 'postgresql' or 'postgres'"
        raise ConfigError(msg)
    try:
        parsed.port  # noqa: B018
    except ValueError as e:
        raise ConfigError("Invalid DSN port. Expected a number between 0 and 65535") from e


def mask_dsn(dsn: str) -> str:
    """Replace the password in a DSN with ``***`` for display."""
    parsed = urlparse(dsn)
    if not parsed.password:
        return dsn
    host = parsed.hostname or ""
    if parsed.port:
        host = f"{host}:{parsed.port}"
    netloc = f"{parsed.username}:***@{host}"
    return parsed._replace(netloc=netloc).geturl()


class Profile(BaseModel):
    dsn: str | None = None
    schema_name: str = "public"
    statement_timeout: float = 30.0
    application_name: str = "table-tool"
    pool_min_size: int = 1
    pool_max_size: int = 4

    @field_validator("dsn")
    @classmethod
    def validate_dsn(cls, v: str | None) -> str | None:
        if v is not None:
            try:
                check_dsn(v)
            except ConfigError as e:
                raise ValueError(e.message) from e
        return v

    @field_validator("statement_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            msg = f"Invalid statement_timeout: {v}. Must be greater than 0"
            raise ValueError(msg)
        return v


class AppConfig(BaseModel):
    default_profile: str | None = None
    default_page_size: int = 50
    max_page_size: int = 1000
    statement_timeout: float = 30.0
    profiles: dict[str, Profile] = {}


class ResolvedConfig(BaseModel):
    dsn: str
    schema_name: str = "public"
    statement_timeout: float = 30.0
    application_name: str = "table-tool"
    pool_min_size: int = 1
    pool_max_size: int = 4
    default_page_size: int = 50
    max_page_size: int = 1000
    active_profile: str | None = None
    sources: dict[str, str] = {}

    @model_validator(mode="after")
    def check_sizes(self) -> ResolvedConfig:
        if self.default_page_size <= 0 or self.max_page_size <= 0:
            msg = "Page sizes must be greater than 0"
            raise ValueError(msg)
        if self.default_page_size > self.max_page_size:
            msg = (
                f"default_page_size ({self.default_page_size}) exceeds "
                f"max_page_size ({self.max_page_size})"
            )
            raise ValueError(msg)
        if self.pool_min_size > self.pool_max_size:
            msg = "pool_min_size must not exceed pool_max_size"
            raise ValueError(msg)
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def masked_dsn(self) -> str:
        return mask_dsn(self.dsn)


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration from TOML file.

    Returns default AppConfig if file doesn't exist.
    Raises ConfigError on malformed TOML or invalid config.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return AppConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Malformed TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid configuration in {config_path}: {e}"
        raise ConfigError(msg) from e


def resolve_config(
    config: AppConfig,
    profile_name: str | None = None,
    dsn: str | None = None,
    **cli_overrides: Any,
) -> ResolvedConfig:
    """Resolve configuration using precedence chain.

    CLI > DSN > env > profile > config defaults > built-in defaults.
    Raises ConfigError when no connection string is available.
    """
    sources: dict[str, str] = {}
    resolved: dict[str, Any] = {}

    # Layer 1: Built-in defaults
    resolved.update(_DEFAULTS)
    for key in resolved:
        sources[key] = "default"

    # Layer 2: Config file global defaults
    for key in ("default_page_size", "max_page_size", "statement_timeout"):
        value = getattr(config, key)
        if value != _DEFAULTS[key]:
            resolved[key] = value
            sources[key] = "config"

    # Layer 3: Named profile
    effective_profile, profile_source = profile_name, "cli: --profile"
    if not effective_profile:
        effective_profile = os.environ.get("TABLE_TOOL_PROFILE")
        profile_source = "env: TABLE_TOOL_PROFILE"
    if not effective_profile:
        effective_profile, profile_source = config.default_profile, "config"

    if effective_profile:
        if effective_profile not in config.profiles:
            available = (
                ", ".join(sorted(config.profiles.keys())) if config.profiles else "none"
            )
            msg = f"Unknown profile: '{effective_profile}'. Available profiles: {available}"
            raise ConfigError(msg)
        profile = config.profiles[effective_profile]
        for key in profile.model_fields_set:
            resolved[key] = getattr(profile, key)
            sources[key] = f"profile: {effective_profile}"

    # Layer 4: Environment variables
    for env_var, field_name in _ENV_VARS.items():
        value = os.environ.get(env_var)
        if value:
            resolved[field_name] = value
            sources[field_name] = f"env: {env_var}"

    # Layer 5: DSN flag
    if dsn:
        resolved["dsn"] = dsn
        sources["dsn"] = "cli: --dsn"

    # Layer 6: CLI flags (highest priority)
    cli_to_field = {
        "schema": "schema_name",
        "timeout": "statement_timeout",
    }
    for cli_name, field_name in cli_to_field.items():
        value = cli_overrides.get(cli_name)
        if value is not None:
            resolved[field_name] = value
            sources[field_name] = f"cli: --{cli_name}"

    if not resolved["dsn"]:
        msg = (
            "No database connection string configured. "
            "Set DATABASE_URL, pass --dsn, or select a profile with a dsn."
        )
        raise ConfigError(msg)
    check_dsn(resolved["dsn"])

    resolved["active_profile"] = effective_profile
    sources["active_profile"] = profile_source if effective_profile else "default"
    resolved["sources"] = sources
    try:
        return ResolvedConfig(**resolved)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
