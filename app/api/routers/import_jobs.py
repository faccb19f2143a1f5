"""
Import job run and status endpoints.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.dependencies import get_import_job_repository, get_import_orchestrator
from app.errors import BlobNotFoundError, JobNotRunnableError
from app.schemas.import_jobs import (
    ImportJobListResponse,
    ImportJobStatusResponse,
    ImportRunRequest,
    ImportRunResponse,
)
from app.services.import_orchestrator_service import ImportOrchestrator
from db.models.import_job import ImportJob
from db.repositories.import_job_repository import ImportJobRepository

router = APIRouter(prefix="/imports", tags=["imports"])


@router.post("/run", response_model=ImportRunResponse)
def run_import(
    payload: ImportRunRequest,
    orchestrator: ImportOrchestrator = Depends(get_import_orchestrator),
) -> ImportRunResponse:
    try:
        result = orchestrator.run_import(payload.job_id)
    except JobNotRunnableError as exc:
        if exc.status is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Import job not found: {payload.job_id}",
            ) from exc
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc

    structural_error = result.structural_error
    if structural_error is not None:
        status_code = (
            status.HTTP_404_NOT_FOUND
            if isinstance(structural_error, BlobNotFoundError)
            else status.HTTP_422_UNPROCESSABLE_ENTITY
        )
        raise HTTPException(status_code=status_code, detail=structural_error.to_dict())

    return ImportRunResponse.model_validate(
        {
            "job_id": result.job_id,
            "status": result.status,
            "summary": result.summary.to_dict(),
        }
    )


@router.get("/{job_id}", response_model=ImportJobStatusResponse)
def get_import_job(
    job_id: UUID,
    repository: ImportJobRepository = Depends(get_import_job_repository),
) -> ImportJobStatusResponse:
    job = repository.get_job_record(job_id)
    if job is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Import job not found: {job_id}",
        )
    return _to_status_response(job)


@router.get("", response_model=ImportJobListResponse)
def list_import_jobs(
    company_id: UUID | None = Query(default=None, description="Optional company (scope) filter"),
    kind: str | None = Query(default=None, description="Optional job kind filter"),
    status_filter: str | None = Query(default=None, alias="status", description="Optional status filter"),
    limit: int = Query(default=100, ge=1, le=500, description="Max jobs returned"),
    repository: ImportJobRepository = Depends(get_import_job_repository),
) -> ImportJobListResponse:
    jobs = repository.list_jobs(
        limit=limit,
        company_id=company_id,
        kind=kind,
        status=status_filter,
    )
    return ImportJobListResponse(jobs=[_to_status_response(job) for job in jobs])


def _to_status_response(job: ImportJob) -> ImportJobStatusResponse:
    return ImportJobStatusResponse(
        job_id=job.id,
        company_id=job.company_id,
        kind=job.kind,
        status=job.status,
        storage_path=job.storage_path,
        file_format=job.file_format,
        created_at=job.created_at,
        updated_at=job.updated_at,
        started_at=job.started_at,
        completed_at=job.completed_at,
        total_rows=job.total_rows,
        ok_rows=job.ok_rows,
        error_rows=job.error_rows,
        summary=job.summary,
    )
