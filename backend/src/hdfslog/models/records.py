"""Models for ingested log records and per-line parse failures."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

SEVERITY_TEXT_MAX = 50  # severity_text VARCHAR(50)

INT64_MIN, INT64_MAX = -(2**63), 2**63 - 1
INT32_MIN, INT32_MAX = -(2**31), 2**31 - 1


class LogRecord(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore", frozen=True)

    timestamp: int = Field(ge=INT64_MIN, le=INT64_MAX)
    severity_text: str
    body: str
    tenant_id: int = Field(ge=INT32_MIN, le=INT32_MAX)

    def as_row(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "severity_text": self.severity_text,
            "body": self.body,
            "tenant_id": self.tenant_id,
        }


class ParseError(BaseModel):
    model_config = ConfigDict(frozen=True)

    line_number: int
    message: str
    field: str | None = None

    def __str__(self) -> str:
        where = f"line {self.line_number}"
        if self.field:
            return f"{where}: {self.field}: {self.message}"
        return f"{where}: {self.message}"


ParseOutcome = LogRecord | ParseError
