"""Load pipeline: parse → batch → insert.

Flow:
  1. Drop and recreate the destination table
  2. Open the newline-delimited JSON source
  3. Parse lines lazily, grouping valid records into batches
  4. Insert each batch before reading further (one batch in flight)
  5. Return the run summary, or raise PipelineAborted on the first insert failure
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path

from sqlalchemy.engine import Connection

from hdfslog.config import DEFAULT_BATCH_SIZE
from hdfslog.errors import BatchInsertError, PipelineAborted, SourceOpenError
from hdfslog.ingestion.batcher import ErrorCallback, iter_batches
from hdfslog.ingestion.parser import SeverityOverflow, open_source, parse_lines, read_lines
from hdfslog.ingestion.schema import prepare_table
from hdfslog.ingestion.sink import insert_batch
from hdfslog.models.pipeline import RunSummary
from hdfslog.models.records import ParseOutcome

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def _counted(outcomes: Iterable[ParseOutcome], summary: RunSummary) -> Iterator[ParseOutcome]:
    for outcome in outcomes:
        summary.total_read += 1
        yield outcome


def load_stream(
    conn: Connection,
    table_name: str,
    lines: Iterable[bytes | str],
    summary: RunSummary,
    batch_size: int = DEFAULT_BATCH_SIZE,
    max_rows: int | None = None,
    severity_overflow: SeverityOverflow = "truncate",
    on_batch: ProgressCallback | None = None,
    on_error: ErrorCallback | None = None,
) -> RunSummary:
    """Drive already-open *lines* through parse, batch and insert.

    *summary* is updated in place so its counters stay at their last-known
    values if an insert fails.
    """
    summary.status = "reading"
    outcomes = _counted(parse_lines(lines, max_rows, severity_overflow), summary)

    for batch in iter_batches(outcomes, batch_size, on_error):
        summary.status = "flushing"
        try:
            inserted = insert_batch(conn, table_name, batch)
        except BatchInsertError as e:
            summary.status = "failed"
            logger.error(
                "Insert failed on batch %d after %d logs inserted",
                summary.batches + 1, summary.total_inserted,
            )
            raise PipelineAborted(
                f"Load into {table_name} aborted on batch {summary.batches + 1}", summary,
            ) from e
        summary.total_inserted += inserted
        summary.batches += 1
        logger.info("Total logs inserted so far: %d", summary.total_inserted)
        if on_batch is not None:
            on_batch(summary.batches, summary.total_inserted)
        summary.status = "reading"

    summary.status = "done"
    return summary


def run(
    conn: Connection,
    table_name: str,
    source: Path,
    batch_size: int = DEFAULT_BATCH_SIZE,
    max_rows: int | None = None,
    severity_overflow: SeverityOverflow = "truncate",
    on_batch: ProgressCallback | None = None,
    on_error: ErrorCallback | None = None,
) -> RunSummary:
    """Recreate *table_name* and load every record from *source* into it.

    Returns the run summary. Fatal errors (table preparation, opening or
    reading the source, inserting a batch) propagate as LoaderError subclasses.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")

    summary = RunSummary(table_name=table_name)
    logger.info("Processing logs from '%s' in batches of %d", source, batch_size)

    prepare_table(conn, table_name)

    with open_source(source) as fh:
        try:
            load_stream(
                conn,
                table_name,
                read_lines(fh, source),
                summary,
                batch_size=batch_size,
                max_rows=max_rows,
                severity_overflow=severity_overflow,
                on_batch=on_batch,
                on_error=on_error,
            )
        except SourceOpenError:
            summary.status = "failed"
            raise

    logger.info("Read %d total log entries from %s", summary.total_read, source)
    return summary
