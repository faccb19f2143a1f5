"""
Shared fixtures: in-memory implementations of every import pipeline port.
"""

from __future__ import annotations

import threading
import uuid
from collections.abc import Callable
from dataclasses import replace
from typing import Any

import pytest

from app.config import ImportSettings
from app.domain.concept_catalog import ConceptCatalog, ConceptCatalogEntry
from app.domain.financial_records import ValidatedRecord
from app.domain.import_job import ImportJobSnapshot, JobSummary, ScopeContext
from app.errors import BlobNotFoundError, RecordWriteError
from app.services.import_orchestrator_service import ImportOrchestrator
from db.models.import_job import ImportJobStatus

ACME_ID = uuid.UUID("00000000-0000-0000-0000-00000000a001")
BETA_ID = uuid.UUID("00000000-0000-0000-0000-00000000b002")


class InMemoryJobStore:
    def __init__(self) -> None:
        self._jobs: dict[uuid.UUID, ImportJobSnapshot] = {}
        self.summaries: dict[uuid.UUID, JobSummary] = {}
        self.transitions: list[tuple[uuid.UUID, str]] = []
        self._lock = threading.Lock()

    def add(
        self,
        *,
        company_id: uuid.UUID,
        kind: str,
        storage_path: str,
        status: str = ImportJobStatus.PENDING,
        file_format: str | None = None,
    ) -> uuid.UUID:
        job_id = uuid.uuid4()
        self._jobs[job_id] = ImportJobSnapshot(
            id=job_id,
            company_id=company_id,
            kind=kind,
            status=status,
            storage_path=storage_path,
            file_format=file_format,
        )
        return job_id

    def status_of(self, job_id: uuid.UUID) -> str:
        return self._jobs[job_id].status

    def get_job(self, job_id: uuid.UUID) -> ImportJobSnapshot | None:
        return self._jobs.get(job_id)

    def set_state(
        self,
        job_id: uuid.UUID,
        state: str,
        *,
        expected_state: str | None = None,
    ) -> bool:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                return False
            if expected_state is not None and job.status != expected_state:
                return False
            self._jobs[job_id] = replace(job, status=state)
            self.transitions.append((job_id, state))
            return True

    def set_summary(self, job_id: uuid.UUID, state: str, summary: JobSummary) -> None:
        with self._lock:
            self._jobs[job_id] = replace(self._jobs[job_id], status=state)
            self.summaries[job_id] = summary
            self.transitions.append((job_id, state))


class InMemoryScopeReader:
    def __init__(self, scopes: list[ScopeContext]) -> None:
        self._scopes = {scope.company_id: scope for scope in scopes}

    def get_scope(self, company_id: uuid.UUID) -> ScopeContext | None:
        return self._scopes.get(company_id)


class InMemoryCatalogReader:
    def __init__(self, catalog: ConceptCatalog) -> None:
        self._catalog = catalog
        self.loads = 0

    def load_catalog(self) -> ConceptCatalog:
        self.loads += 1
        return self._catalog


class InMemoryRecordWriter:
    """Upserts by natural key; optionally fails for records matching ``fail_when``."""

    def __init__(self, fail_when: Callable[[ValidatedRecord], bool] | None = None) -> None:
        self.rows: dict[tuple[Any, ...], ValidatedRecord] = {}
        self.writes = 0
        self._fail_when = fail_when
        self._lock = threading.Lock()

    def write(self, record: ValidatedRecord) -> None:
        if self._fail_when is not None and self._fail_when(record):
            raise RecordWriteError(f"Could not store {record.kind} record: IntegrityError.")
        with self._lock:
            self.rows[(record.kind, *record.natural_key())] = record
            self.writes += 1

    def records_for(self, company_id: uuid.UUID) -> list[ValidatedRecord]:
        return [record for record in self.rows.values() if record.company_id == company_id]


class InMemoryBlobStore:
    def __init__(self, blobs: dict[str, bytes] | None = None) -> None:
        self.blobs: dict[str, bytes] = dict(blobs or {})

    def download(self, path: str) -> bytes:
        try:
            return self.blobs[path]
        except KeyError:
            raise BlobNotFoundError(
                f"File '{path}' was not found in storage.",
                details={"storage_path": path},
            ) from None


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def catalog() -> ConceptCatalog:
    return ConceptCatalog(
        [
            ConceptCatalogEntry("PYG_INGRESOS", "Ingresos de explotacion", "INGRESOS", mandatory=True),
            ConceptCatalogEntry("PYG_OTROS_INGRESOS_OP", "Otros ingresos operativos", "INGRESOS"),
            ConceptCatalogEntry("PYG_COSTE_VENTAS", "Coste de ventas", "GASTOS_OPERATIVOS"),
            ConceptCatalogEntry("PYG_GASTOS_PERSONAL", "Gastos de personal", "GASTOS_OPERATIVOS"),
            ConceptCatalogEntry("PYG_AMORTIZACION", "Amortizacion", "AMORTIZACIONES"),
            ConceptCatalogEntry("PYG_RESULTADO_NETO", "Resultado neto", "RESULTADO", mandatory=True),
        ]
    )


@pytest.fixture()
def acme_scope() -> ScopeContext:
    return ScopeContext(company_id=ACME_ID, company_code="ACME", name="Acme Industrial")


@pytest.fixture()
def beta_scope() -> ScopeContext:
    return ScopeContext(company_id=BETA_ID, company_code="BETA", name="Beta Servicios")


@pytest.fixture()
def job_store() -> InMemoryJobStore:
    return InMemoryJobStore()


@pytest.fixture()
def record_writer() -> InMemoryRecordWriter:
    return InMemoryRecordWriter()


@pytest.fixture()
def blob_store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture()
def catalog_reader(catalog: ConceptCatalog) -> InMemoryCatalogReader:
    return InMemoryCatalogReader(catalog)


@pytest.fixture()
def import_settings() -> ImportSettings:
    return ImportSettings(
        csv_delimiter=",",
        max_file_bytes=1024 * 1024,
        max_rows=1000,
        max_summary_errors=500,
        log_validation_errors=False,
    )


@pytest.fixture()
def make_orchestrator(
    job_store: InMemoryJobStore,
    record_writer: InMemoryRecordWriter,
    blob_store: InMemoryBlobStore,
    catalog_reader: InMemoryCatalogReader,
    acme_scope: ScopeContext,
    beta_scope: ScopeContext,
    import_settings: ImportSettings,
) -> Callable[..., ImportOrchestrator]:
    def _factory(**overrides: Any) -> ImportOrchestrator:
        kwargs: dict[str, Any] = {
            "job_store": job_store,
            "scope_reader": InMemoryScopeReader([acme_scope, beta_scope]),
            "catalog_reader": catalog_reader,
            "record_writer": record_writer,
            "blob_store": blob_store,
            "settings": import_settings,
        }
        kwargs.update(overrides)
        return ImportOrchestrator(**kwargs)

    return _factory


@pytest.fixture()
def make_record_writer() -> type[InMemoryRecordWriter]:
    return InMemoryRecordWriter
