"""Model for the counters of a single load run."""

from __future__ import annotations

from pydantic import BaseModel


class RunSummary(BaseModel):
    table_name: str
    total_read: int = 0
    total_inserted: int = 0
    batches: int = 0
    status: str = "idle"  # idle, reading, flushing, done, failed

    @property
    def error_count(self) -> int:
        """Lines read but never inserted; every parse failure is skipped."""
        return self.total_read - self.total_inserted
