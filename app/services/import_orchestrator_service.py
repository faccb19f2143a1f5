"""
app/services/import_orchestrator_service.py

Runs one import job end to end: claim, resolve scope, download, parse,
validate and write each row, audit, finalize.

Job lifecycle: pending -> processing -> done | failed. Terminal states are
final; the job record is mutated only when claimed and when finished.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from app.config import ImportSettings, get_import_settings
from app.domain.concept_catalog import ConceptCatalog
from app.domain.financial_records import ValidatedRecord
from app.domain.import_job import ImportJobSnapshot, JobSummary, RowValidationError
from app.domain.import_kinds import KIND_SPECS
from app.domain.ports import BlobStore, CatalogReader, JobStore, RecordWriter, ScopeReader
from app.errors import (
    JobNotRunnableError,
    MissingHeadersError,
    RecordWriteError,
    ScopeNotFoundError,
    StructuralImportError,
)
from app.logging_utils import log_job_event
from app.parsers.file_parser import FileParser, resolve_file_format
from app.validators.concept_auditor import ConceptAuditor
from app.validators.row_validator import RowValidator
from db.models.import_job import ImportJobStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportRunResult:
    job_id: uuid.UUID
    status: str
    summary: JobSummary
    structural_error: StructuralImportError | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "job_id": str(self.job_id),
            "status": self.status,
            "summary": self.summary.to_dict(),
        }
        if self.structural_error is not None:
            payload["structural_error"] = self.structural_error.to_dict()
        return payload


class ImportOrchestrator:
    """
    Coordinates the collaborators of one import run.

    Rows are processed sequentially in file order. A row that fails
    validation, duplicates an earlier accepted row, or cannot be written is
    recorded as that row's error and never affects other rows.
    """

    def __init__(
        self,
        *,
        job_store: JobStore,
        scope_reader: ScopeReader,
        catalog_reader: CatalogReader,
        record_writer: RecordWriter,
        blob_store: BlobStore,
        settings: ImportSettings | None = None,
        parser: FileParser | None = None,
        validator: RowValidator | None = None,
        auditor: ConceptAuditor | None = None,
    ) -> None:
        self._job_store = job_store
        self._scope_reader = scope_reader
        self._catalog_reader = catalog_reader
        self._record_writer = record_writer
        self._blob_store = blob_store
        self._settings = settings or get_import_settings()
        self._parser = parser or FileParser(
            delimiter=self._settings.csv_delimiter,
            max_rows=self._settings.max_rows,
            max_file_bytes=self._settings.max_file_bytes,
        )
        self._validator = validator or RowValidator()
        self._auditor = auditor or ConceptAuditor()

    def run_import(self, job_id: uuid.UUID) -> ImportRunResult:
        job = self._claim(job_id)
        log_job_event(
            logger,
            logging.INFO,
            "import_job_started",
            job,
            storage_path=job.storage_path,
            file_format=job.file_format,
        )

        try:
            structural_error: StructuralImportError | None = None
            try:
                summary = self._process(job)
            except StructuralImportError as exc:
                structural_error = exc
                summary = JobSummary(
                    total_rows=0,
                    ok_rows=0,
                    error_rows=0,
                    errors=[RowValidationError.job_level(exc.message)],
                )
                log_job_event(
                    logger,
                    logging.WARNING,
                    "import_job_structural_error",
                    job,
                    code=exc.code,
                    message=exc.message,
                    details=exc.details,
                )

            status = ImportJobStatus.DONE if not summary.errors else ImportJobStatus.FAILED
            summary = self._cap_errors(summary)
            self._job_store.set_summary(job.id, status, summary)
        except Exception as exc:
            logger.exception("Import job crashed job_id=%s", job.id)
            self._mark_job_failed(job.id, exc)
            raise

        log_job_event(
            logger,
            logging.INFO,
            "import_job_finished",
            job,
            status=status,
            total_rows=summary.total_rows,
            ok_rows=summary.ok_rows,
            error_rows=summary.error_rows,
            warnings=len(summary.warnings),
        )
        return ImportRunResult(
            job_id=job.id,
            status=status,
            summary=summary,
            structural_error=structural_error,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _claim(self, job_id: uuid.UUID) -> ImportJobSnapshot:
        job = self._job_store.get_job(job_id)
        if job is None:
            raise JobNotRunnableError(job_id, reason="job not found")
        if job.status != ImportJobStatus.PENDING:
            raise JobNotRunnableError(job_id, reason=f"status is '{job.status}'", status=job.status)

        claimed = self._job_store.set_state(
            job_id,
            ImportJobStatus.PROCESSING,
            expected_state=ImportJobStatus.PENDING,
        )
        if not claimed:
            current = self._job_store.get_job(job_id)
            status = current.status if current is not None else None
            raise JobNotRunnableError(job_id, reason="job was claimed by another run", status=status)
        return job

    def _mark_job_failed(self, job_id: uuid.UUID, exc: Exception) -> None:
        summary = JobSummary(
            total_rows=0,
            ok_rows=0,
            error_rows=0,
            errors=[RowValidationError.job_level(f"Unexpected error: {exc.__class__.__name__}.")],
        )
        try:
            self._job_store.set_summary(job_id, ImportJobStatus.FAILED, summary)
        except Exception:
            logger.exception("Failed to mark import job as failed job_id=%s", job_id)

    # ------------------------------------------------------------------
    # Processing
    # ------------------------------------------------------------------

    def _process(self, job: ImportJobSnapshot) -> JobSummary:
        spec = KIND_SPECS.get(job.kind)
        if spec is None:
            raise StructuralImportError(
                f"Unknown import kind '{job.kind}'.",
                details={"kind": job.kind},
            )

        scope = self._scope_reader.get_scope(job.company_id)
        if scope is None:
            raise ScopeNotFoundError(
                f"Company {job.company_id} does not exist.",
                details={"company_id": str(job.company_id)},
            )

        file_format = job.file_format or resolve_file_format(job.storage_path)
        blob = self._blob_store.download(job.storage_path)
        parsed = self._parser.parse(blob, file_format=file_format)

        missing = spec.missing_headers(parsed.headers)
        if missing:
            raise MissingHeadersError(missing)

        catalog = self._catalog_reader.load_catalog() if spec.uses_catalog else ConceptCatalog.empty()

        errors: list[RowValidationError] = []
        accepted: list[ValidatedRecord] = []
        first_seen: dict[tuple[Any, ...], int] = {}

        for row in parsed.rows:
            outcome = self._validator.validate(row=row, kind=job.kind, catalog=catalog, scope=scope)
            if isinstance(outcome, RowValidationError):
                self._record_error(job.id, errors, outcome)
                continue

            key = outcome.natural_key()
            earlier_row = first_seen.get(key)
            if earlier_row is not None:
                self._record_error(
                    job.id,
                    errors,
                    RowValidationError(
                        row_number=row.row_number,
                        messages=(f"Duplicate of row {earlier_row} (same natural key).",),
                    ),
                )
                continue

            try:
                self._record_writer.write(outcome)
            except RecordWriteError as exc:
                self._record_error(
                    job.id,
                    errors,
                    RowValidationError(row_number=row.row_number, messages=(str(exc),)),
                )
                continue

            first_seen[key] = row.row_number
            accepted.append(outcome)

        error_rows = len(errors)
        audit = self._auditor.audit(records=accepted, catalog=catalog, kind=job.kind)
        errors.extend(audit.errors)

        return JobSummary(
            total_rows=len(parsed.rows),
            ok_rows=len(accepted),
            error_rows=error_rows,
            errors=errors,
            warnings=list(audit.warnings),
        )

    def _record_error(
        self,
        job_id: uuid.UUID,
        errors: list[RowValidationError],
        error: RowValidationError,
    ) -> None:
        errors.append(error)
        if self._settings.log_validation_errors:
            logger.warning(
                "Import row rejected job_id=%s row=%s messages=%s",
                job_id,
                error.row_number,
                list(error.messages),
            )

    def _cap_errors(self, summary: JobSummary) -> JobSummary:
        limit = self._settings.max_summary_errors
        if len(summary.errors) <= limit:
            return summary
        omitted = len(summary.errors) - limit
        return JobSummary(
            total_rows=summary.total_rows,
            ok_rows=summary.ok_rows,
            error_rows=summary.error_rows,
            errors=summary.errors[:limit],
            warnings=[*summary.warnings, f"{omitted} additional error entries were omitted."],
        )


def build_import_orchestrator(
    db: Session,
    *,
    settings: ImportSettings | None = None,
    blob_store: BlobStore | None = None,
) -> ImportOrchestrator:
    """
    Compose an orchestrator whose stores share one SQLAlchemy session.
    """

    from app.repositories.concept_catalog_repository import (
        CompanyScopeRepository,
        ConceptCatalogRepository,
    )
    from app.repositories.financial_record_repository import FinancialRecordRepository
    from app.storage import get_blob_store
    from db.repositories.import_job_repository import ImportJobRepository

    return ImportOrchestrator(
        job_store=ImportJobRepository(db),
        scope_reader=CompanyScopeRepository(db),
        catalog_reader=ConceptCatalogRepository(db),
        record_writer=FinancialRecordRepository(db),
        blob_store=blob_store or get_blob_store(),
        settings=settings,
    )


def run_import_job(
    job_id: uuid.UUID,
    *,
    session_factory: Callable[[], Session] | None = None,
) -> ImportRunResult:
    """
    Run one job in its own session; used by the CLI and background callers.
    """

    if session_factory is None:
        from db.session import SessionLocal

        session_factory = SessionLocal

    with session_factory() as db:
        return build_import_orchestrator(db).run_import(job_id)
