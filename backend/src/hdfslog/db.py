"""SQLAlchemy connection helpers for the TiDB/MySQL destination."""

from __future__ import annotations

import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from hdfslog.config import Settings
from hdfslog.errors import DatabaseConnectError

logger = logging.getLogger(__name__)


def create_db_engine(settings: Settings) -> Engine:
    """Build an engine for the configured TiDB endpoint."""
    return create_engine(settings.database_url, pool_pre_ping=True)


def connect(engine: Engine, attempts: int = 3, max_wait: float = 10.0) -> Connection:
    """Open a connection, retrying while the server refuses it.

    Errors that retrying cannot fix, such as bad credentials or an unknown
    database, fail on the first attempt.

    Only establishing the connection is retried; inserts never are.
    """
    retrying = Retrying(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=1, min=min(2.0, max_wait), max=max_wait),
        retry=retry_if_exception_type(OperationalError),
        reraise=True,
    )
    try:
        for attempt in retrying:
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    logger.warning(
                        "Retrying database connection (attempt %d/%d)",
                        attempt.retry_state.attempt_number, attempts,
                    )
                conn = engine.connect()
    except SQLAlchemyError as e:
        raise DatabaseConnectError("Error connecting to the database") from e
    return conn


def open_connection(settings: Settings) -> Connection:
    """Connect to the database described by *settings*."""
    logger.info(
        "Connecting to tidb, host=%s port=%s", settings.tidb_host, settings.tidb_port,
    )
    engine = create_db_engine(settings)
    conn = connect(engine, attempts=settings.db_connect_attempts)
    logger.info("Successfully connected to the database")
    return conn
