"""Line parsing for newline-delimited JSON log files.

Flow:
  1. Open the source file in binary mode (open failures are fatal)
  2. Number lines from 1, optionally capped at max_rows
  3. Decode each line and validate it into a LogRecord, or a ParseError
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from itertools import islice
from pathlib import Path
from typing import BinaryIO, Literal

from pydantic import ValidationError

from hdfslog.errors import SourceOpenError
from hdfslog.models.records import SEVERITY_TEXT_MAX, LogRecord, ParseError, ParseOutcome

logger = logging.getLogger(__name__)

SeverityOverflow = Literal["truncate", "reject"]


def _strip_eol(line: bytes | str) -> bytes | str:
    if isinstance(line, bytes):
        return line.rstrip(b"\r\n")
    return line.rstrip("\r\n")


def parse_line(
    line: bytes | str,
    line_number: int,
    severity_overflow: SeverityOverflow = "truncate",
) -> ParseOutcome:
    """Parse one line into a LogRecord, or a ParseError describing why not.

    Never raises. Unknown fields are ignored; a severity_text longer than the
    column is truncated or rejected according to *severity_overflow*.
    """
    text = _strip_eol(line)
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            return ParseError(line_number=line_number, message=f"invalid UTF-8: {e.reason}")

    try:
        record = LogRecord.model_validate_json(text)
    except ValidationError as e:
        err = e.errors(include_url=False)[0]
        loc = err.get("loc") or ()
        field = str(loc[0]) if loc else None
        return ParseError(line_number=line_number, message=err["msg"], field=field)

    if len(record.severity_text) > SEVERITY_TEXT_MAX:
        if severity_overflow == "reject":
            return ParseError(
                line_number=line_number,
                message=f"longer than {SEVERITY_TEXT_MAX} characters",
                field="severity_text",
            )
        record = record.model_copy(
            update={"severity_text": record.severity_text[:SEVERITY_TEXT_MAX]},
        )
    return record


def parse_lines(
    lines: Iterable[bytes | str],
    max_rows: int | None = None,
    severity_overflow: SeverityOverflow = "truncate",
) -> Iterator[ParseOutcome]:
    """Lazily yield one parse outcome per line, stopping after *max_rows* lines."""
    if max_rows is not None:
        lines = islice(lines, max_rows)
    for idx, line in enumerate(lines, start=1):
        yield parse_line(line, idx, severity_overflow)


def open_source(path: Path) -> BinaryIO:
    """Open the input file for line-by-line reading."""
    try:
        return open(path, "rb")
    except OSError as e:
        raise SourceOpenError(f"Error opening file {path}") from e


def read_lines(fh: Iterable[bytes], path: Path) -> Iterator[bytes]:
    """Yield raw lines from an open source; a failed read is fatal."""
    try:
        yield from fh
    except OSError as e:
        raise SourceOpenError(f"Error reading file {path}") from e
