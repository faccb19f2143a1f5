"""
Repository for import job lifecycle persistence and status lookup.

State changes commit immediately: the claim must be visible to concurrent
runners before any data is touched, and the terminal update is the single
write that publishes the summary.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Select, select, update
from sqlalchemy.orm import Session

from app.domain.import_job import ImportJobSnapshot, JobSummary
from db.models.import_job import ImportJob, ImportJobStatus


class ImportJobRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def get_job(self, job_id: uuid.UUID) -> ImportJobSnapshot | None:
        job = self.get_job_record(job_id)
        if job is None:
            return None
        return ImportJobSnapshot(
            id=job.id,
            company_id=job.company_id,
            kind=job.kind,
            status=job.status,
            storage_path=job.storage_path,
            file_format=job.file_format,
        )

    def get_job_record(self, job_id: uuid.UUID) -> ImportJob | None:
        return self._session.get(ImportJob, job_id)

    def list_jobs(
        self,
        *,
        limit: int = 100,
        company_id: uuid.UUID | None = None,
        kind: str | None = None,
        status: str | None = None,
    ) -> list[ImportJob]:
        stmt: Select[tuple[ImportJob]] = select(ImportJob)

        if company_id:
            stmt = stmt.where(ImportJob.company_id == company_id)
        if kind:
            stmt = stmt.where(ImportJob.kind == kind)
        if status:
            stmt = stmt.where(ImportJob.status == status)

        stmt = stmt.order_by(ImportJob.created_at.desc()).limit(max(1, limit))
        return list(self._session.scalars(stmt).all())

    def set_state(
        self,
        job_id: uuid.UUID,
        state: str,
        *,
        expected_state: str | None = None,
    ) -> bool:
        now = datetime.now(timezone.utc)
        values: dict[str, object] = {"status": state, "updated_at": now}
        if state == ImportJobStatus.PROCESSING:
            values["started_at"] = now

        stmt = update(ImportJob).where(ImportJob.id == job_id)
        if expected_state is not None:
            stmt = stmt.where(ImportJob.status == expected_state)
        stmt = stmt.values(**values).returning(ImportJob.id).execution_options(
            synchronize_session=False
        )

        claimed = self._session.execute(stmt).scalar_one_or_none()
        self._session.commit()
        return claimed is not None

    def set_summary(self, job_id: uuid.UUID, state: str, summary: JobSummary) -> None:
        if not self._session.is_active:
            # A failed statement earlier in the run left the transaction unusable.
            self._session.rollback()
        now = datetime.now(timezone.utc)
        stmt = (
            update(ImportJob)
            .where(ImportJob.id == job_id)
            .values(
                status=state,
                summary=summary.to_dict(),
                total_rows=summary.total_rows,
                ok_rows=summary.ok_rows,
                error_rows=summary.error_rows,
                completed_at=now,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        self._session.execute(stmt)
        self._session.commit()
