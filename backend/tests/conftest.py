"""Shared pytest fixtures for all tests."""

import json

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Connection

# SQLite cannot auto-generate the second column of a composite primary key, so
# tests load into a table with a rowid-backed id instead of the MySQL DDL.
SQLITE_LOG_TABLE_DDL = """
CREATE TABLE {name} (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp BIGINT,
    severity_text VARCHAR(50),
    body TEXT,
    tenant_id INTEGER CHECK (tenant_id >= 0)
)
"""


def make_line(timestamp=1, severity_text="INFO", body="msg", tenant_id=7, **extra) -> str:
    payload = {
        "timestamp": timestamp,
        "severity_text": severity_text,
        "body": body,
        "tenant_id": tenant_id,
        **extra,
    }
    return json.dumps(payload)


def _create_sqlite_log_table(conn: Connection, table_name: str) -> None:
    conn.exec_driver_sql(f"DROP TABLE IF EXISTS {table_name}")
    conn.exec_driver_sql(SQLITE_LOG_TABLE_DDL.format(name=table_name))
    conn.commit()


@pytest.fixture
def line():
    """Build one JSON log line; keyword arguments override the defaults."""
    return make_line


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine for testing."""
    test_engine = create_engine("sqlite:///:memory:")
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def conn(engine):
    """A single connection; the in-memory database lives as long as it does."""
    with engine.connect() as connection:
        yield connection


@pytest.fixture
def sqlite_prepare():
    """Drop-in replacement for prepare_table that works on SQLite."""
    return _create_sqlite_log_table


@pytest.fixture
def log_table(conn, sqlite_prepare):
    """Name of an empty destination table on the test connection."""
    sqlite_prepare(conn, "hdfs_logs")
    return "hdfs_logs"


@pytest.fixture
def write_jsonl(tmp_path):
    """Write lines to a file under tmp_path and return its path."""

    def _write(lines, name="logs.json"):
        path = tmp_path / name
        path.write_text("".join(f"{ln}\n" for ln in lines), encoding="utf-8")
        return path

    return _write


def fetch_rows(conn: Connection, table_name: str) -> list[tuple]:
    return conn.exec_driver_sql(
        f"SELECT timestamp, severity_text, body, tenant_id FROM {table_name} ORDER BY id"
    ).all()


@pytest.fixture
def rows(conn):
    """Read back (timestamp, severity_text, body, tenant_id) in insertion order."""
    return lambda table_name: fetch_rows(conn, table_name)
