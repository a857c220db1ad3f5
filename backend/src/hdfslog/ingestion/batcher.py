"""Group parse outcomes into fixed-size batches of records."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator

from hdfslog.models.records import LogRecord, ParseError, ParseOutcome

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[ParseError], None]


def log_parse_error(error: ParseError) -> None:
    logger.warning("Error processing log entry at %s", error)


def iter_batches(
    outcomes: Iterable[ParseOutcome],
    batch_size: int,
    on_error: ErrorCallback | None = None,
) -> Iterator[list[LogRecord]]:
    """Yield lists of exactly *batch_size* records, then any remainder.

    Parse errors go to *on_error* (a WARNING log by default) and never take a
    slot in a batch. Nothing is yielded for a stream with no valid records.
    The caller owns each yielded list; the generator does not touch it again.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")
    report = on_error or log_parse_error

    batch: list[LogRecord] = []
    for outcome in outcomes:
        if isinstance(outcome, ParseError):
            report(outcome)
            continue
        batch.append(outcome)
        if len(batch) >= batch_size:
            yield batch
            batch = []

    if batch:
        yield batch
