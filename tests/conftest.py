"""Shared test fixtures for Table Tool."""

from pathlib import Path
from tempfile import TemporaryDirectory

import pytest
from typer.testing import CliRunner

from table_tool.cli.main import app
from tests.fake_client import FakeClient, FakeTable
from tests.integration_config import TEST_DATABASE_URL

_ENV_VARS = (
    "DATABASE_URL",
    "TABLE_TOOL_SCHEMA",
    "TABLE_TOOL_PROFILE",
    "TABLE_TOOL_SENTRY_DSN",
)


def pytest_collection_modifyitems(config, items):
    if TEST_DATABASE_URL:
        return
    skip = pytest.mark.skip(reason="TABLE_TOOL_TEST_DATABASE_URL not set")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep the developer's shell settings out of config resolution."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def runner():
    """Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_runner(runner):
    """Invoke the CLI app with the given arguments."""

    def invoke(*args: str, **kwargs):
        return runner.invoke(app, list(args), **kwargs)

    return invoke


@pytest.fixture
def temp_dir():
    """Temporary directory for test files."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def orders_table():
    return FakeTable(
        columns=[
            ("id", "integer", False),
            ("customer_id", "integer", False),
            ("status", "text", True),
            ("amount", "numeric", True),
        ],
        primary_key=["id"],
        rows=[
            {"id": 5, "customer_id": 42, "status": "pending", "amount": 10},
            {"id": 7, "customer_id": 42, "status": "pending_review", "amount": None},
            {"id": 9, "customer_id": 17, "status": "shipped", "amount": 99},
        ],
    )


@pytest.fixture
def fake_client(orders_table):
    """In-memory client with an ``orders`` table, a keyless ``audit_log`` table
    and a composite-keyed ``order_items`` table in the ``public`` schema."""
    return FakeClient(
        {
            "orders": orders_table,
            "audit_log": FakeTable(
                columns=[("event", "text", True), ("at", "timestamp with time zone", True)],
                rows=[{"event": "login", "at": None}],
            ),
            "order_items": FakeTable(
                columns=[
                    ("order_id", "integer", False),
                    ("line_no", "integer", False),
                    ("sku", "text", False),
                ],
                primary_key=["order_id", "line_no"],
            ),
        }
    )
