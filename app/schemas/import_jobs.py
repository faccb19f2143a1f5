"""
Schemas for import job run and status endpoints.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class ImportRunRequest(BaseModel):
    job_id: UUID


class RowErrorResponse(BaseModel):
    row: int = Field(description="Data row number, 0 for job-level errors")
    messages: list[str] = Field(default_factory=list)


class ImportSummaryResponse(BaseModel):
    total_rows: int = 0
    ok_rows: int = 0
    error_rows: int = 0
    warnings: list[str] = Field(default_factory=list)
    errors: list[RowErrorResponse] = Field(default_factory=list)


class ImportRunResponse(BaseModel):
    job_id: UUID
    status: str
    summary: ImportSummaryResponse


class ImportJobStatusResponse(BaseModel):
    job_id: UUID
    company_id: UUID
    kind: str
    status: str
    storage_path: str
    file_format: str | None = None
    created_at: datetime
    updated_at: datetime
    started_at: datetime | None = None
    completed_at: datetime | None = None
    total_rows: int | None = None
    ok_rows: int | None = None
    error_rows: int | None = None
    summary: dict[str, Any] | None = None


class ImportJobListResponse(BaseModel):
    jobs: list[ImportJobStatusResponse] = Field(default_factory=list)
