"""Write one batch of records to the destination table."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import insert
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from hdfslog.errors import BatchInsertError
from hdfslog.ingestion.schema import insert_target
from hdfslog.models.records import LogRecord

logger = logging.getLogger(__name__)


def insert_batch(conn: Connection, table_name: str, batch: Sequence[LogRecord]) -> int:
    """Insert *batch* with one parameterized statement and commit it.

    Rows bind in batch order. On failure the transaction is rolled back so no
    row of the batch is visible, and BatchInsertError is raised. Returns the
    number of rows inserted.
    """
    if not batch:
        raise ValueError("insert_batch requires a non-empty batch")

    stmt = insert(insert_target(table_name))
    params = [record.as_row() for record in batch]
    try:
        conn.execute(stmt, params)
        conn.commit()
    except SQLAlchemyError as e:
        conn.rollback()
        raise BatchInsertError(f"Error inserting batch into {table_name}") from e

    logger.info(
        "%d logs from batch inserted successfully into %s", len(batch), table_name,
    )
    return len(batch)
