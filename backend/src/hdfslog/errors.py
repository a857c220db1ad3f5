"""Fatal loader errors.

Every infrastructure failure is raised as a ``LoaderError`` subclass chained
(``raise ... from exc``) to the driver or I/O error underneath, so the CLI can
print the stage that failed followed by its cause.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hdfslog.models.pipeline import RunSummary


class LoaderError(Exception):
    """Base class for errors that abort a load run."""


class DatabaseConnectError(LoaderError):
    pass


class TablePrepareError(LoaderError):
    pass


class SourceOpenError(LoaderError):
    pass


class BatchInsertError(LoaderError):
    pass


class PipelineAborted(LoaderError):
    """A run stopped mid-stream. Carries the counters as they stood."""

    def __init__(self, message: str, summary: RunSummary) -> None:
        super().__init__(message)
        self.summary = summary
