"""
app/domain/import_job.py

Domain models shared by the import orchestrator and its collaborators.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ImportJobSnapshot:
    """
    Read-only view of an import job as seen at the start of a run.
    """

    id: uuid.UUID
    company_id: uuid.UUID
    kind: str
    status: str
    storage_path: str
    file_format: str | None = None


@dataclass(frozen=True)
class ScopeContext:
    """
    Owning company of a job plus the identifiers a row may embed to name it.
    """

    company_id: uuid.UUID
    company_code: str | None
    name: str | None = None

    def matches_code(self, identifier: str) -> bool:
        candidate = identifier.strip()
        return bool(candidate) and self.company_code is not None and candidate == self.company_code.strip()

    def matches(self, identifier: str) -> bool:
        """Company code, or the display name compared case-insensitively."""
        if self.matches_code(identifier):
            return True
        candidate = identifier.strip()
        return bool(candidate) and self.name is not None and candidate.casefold() == self.name.strip().casefold()


@dataclass(frozen=True)
class ParsedRow:
    """
    One data row of an uploaded file. ``row_number`` is 1 for the first row after the header.
    """

    row_number: int
    values: tuple[str, ...]
    headers: tuple[str, ...]

    def as_mapping(self) -> dict[str, str]:
        return {header: value for header, value in zip(self.headers, self.values)}


@dataclass(frozen=True)
class ParsedFile:
    headers: tuple[str, ...]
    rows: list[ParsedRow]


@dataclass(frozen=True)
class RowValidationError:
    """
    Errors for one data row; ``row_number`` 0 marks job-level errors.
    """

    row_number: int
    messages: tuple[str, ...]

    @classmethod
    def job_level(cls, *messages: str) -> RowValidationError:
        return cls(row_number=0, messages=tuple(messages))

    def to_dict(self) -> dict[str, Any]:
        return {"row": self.row_number, "messages": list(self.messages)}


@dataclass(frozen=True)
class JobSummary:
    """
    Terminal summary persisted onto the job record exactly once.
    """

    total_rows: int
    ok_rows: int
    error_rows: int
    errors: list[RowValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_rows": self.total_rows,
            "ok_rows": self.ok_rows,
            "error_rows": self.error_rows,
            "errors": [error.to_dict() for error in self.errors],
            "warnings": list(self.warnings),
        }
