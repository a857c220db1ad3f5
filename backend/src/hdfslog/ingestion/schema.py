"""Destination table definition and the drop/recreate step run before each load."""

from __future__ import annotations

import logging

from sqlalchemy import (
    BigInteger,
    Column,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Table,
    Text,
    UniqueConstraint,
    column,
    table,
)
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.schema import CreateTable, DropTable
from sqlalchemy.sql.expression import TableClause

from hdfslog.errors import TablePrepareError
from hdfslog.models.records import SEVERITY_TEXT_MAX

logger = logging.getLogger(__name__)

INSERT_COLUMNS = ("timestamp", "severity_text", "body", "tenant_id")
AUTO_INCREMENT_START = 1000


def log_table(name: str, metadata: MetaData | None = None) -> Table:
    """Full table definition, used for DDL.

    The primary key leads with tenant_id, so InnoDB needs a second key led by
    the auto-increment id. It is declared as an inline unique constraint
    because CREATE TABLE is rejected (error 1075) before any separate
    CREATE INDEX could run.
    """
    return Table(
        name,
        metadata if metadata is not None else MetaData(),
        Column("id", BigInteger, autoincrement=True),
        Column("timestamp", BigInteger),
        Column("severity_text", String(SEVERITY_TEXT_MAX)),
        Column("body", Text),
        Column("tenant_id", Integer),
        PrimaryKeyConstraint("tenant_id", "id"),
        UniqueConstraint("id", name="idx_autoinc_id"),
        mysql_auto_increment=str(AUTO_INCREMENT_START),
    )


def insert_target(name: str) -> TableClause:
    """Lightweight table clause naming only the inserted columns, in bind order."""
    return table(name, *(column(c) for c in INSERT_COLUMNS))


def prepare_table(conn: Connection, table_name: str) -> None:
    """Drop the destination table if present and create it empty."""
    tbl = log_table(table_name)
    try:
        conn.execute(DropTable(tbl, if_exists=True))
        logger.info("Table %s dropped successfully", table_name)
        conn.execute(CreateTable(tbl))
        conn.commit()
    except SQLAlchemyError as e:
        conn.rollback()
        raise TablePrepareError(f"Error recreating table {table_name}") from e
    logger.info("Table %s created successfully", table_name)
