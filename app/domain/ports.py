"""
app/domain/ports.py

Narrow collaborator interfaces the import orchestrator depends on.

SQLAlchemy and storage-backed implementations live under ``app/repositories``
and ``app/storage``; tests substitute in-memory fakes.
"""

from __future__ import annotations

import uuid
from typing import Protocol

from app.domain.concept_catalog import ConceptCatalog
from app.domain.financial_records import ValidatedRecord
from app.domain.import_job import ImportJobSnapshot, JobSummary, ScopeContext


class BlobStore(Protocol):
    def download(self, path: str) -> bytes:
        """Return the blob at ``path``; raise BlobNotFoundError or BlobDownloadError."""
        ...


class JobStore(Protocol):
    def get_job(self, job_id: uuid.UUID) -> ImportJobSnapshot | None:
        ...

    def set_state(
        self,
        job_id: uuid.UUID,
        state: str,
        *,
        expected_state: str | None = None,
    ) -> bool:
        """Move the job to ``state``; return False when ``expected_state`` did not match."""
        ...

    def set_summary(self, job_id: uuid.UUID, state: str, summary: JobSummary) -> None:
        """Persist the terminal state and its summary in one atomic update."""
        ...


class CatalogReader(Protocol):
    def load_catalog(self) -> ConceptCatalog:
        ...


class ScopeReader(Protocol):
    def get_scope(self, company_id: uuid.UUID) -> ScopeContext | None:
        ...


class RecordWriter(Protocol):
    def write(self, record: ValidatedRecord) -> None:
        """Insert or replace ``record`` by natural key; raise RecordWriteError on failure."""
        ...
