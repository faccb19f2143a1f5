"""
app/errors.py

Exception hierarchy of the import pipeline.

Structural errors abort a job before any row is processed and are the only
category that prevents writes. Row-level and audit-level problems are data
(``RowValidationError``) and never raised.
"""

from __future__ import annotations

from typing import Any, Sequence


class ImportPipelineError(Exception):
    """Base exception for import pipeline failures."""


class JobNotRunnableError(ImportPipelineError):
    """
    Raised when a job does not exist or is not in ``pending`` state.
    """

    def __init__(self, job_id: object, *, reason: str, status: str | None = None) -> None:
        self.job_id = job_id
        self.reason = reason
        self.status = status
        super().__init__(f"Import job {job_id} is not runnable: {reason}.")


class StructuralImportError(ImportPipelineError):
    """
    File- or job-level defect that prevents any row processing.
    """

    code = "structural_error"

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class ScopeNotFoundError(StructuralImportError):
    code = "scope_not_found"


class BlobDownloadError(StructuralImportError):
    code = "download_failed"


class BlobNotFoundError(BlobDownloadError):
    code = "file_not_found"


class UnsupportedFormatError(StructuralImportError):
    code = "unsupported_format"


class EmptyFileError(StructuralImportError):
    code = "empty_file"


class FileLimitExceededError(StructuralImportError):
    code = "file_limit_exceeded"


class MissingHeadersError(StructuralImportError):
    code = "missing_headers"

    def __init__(self, missing: Sequence[str]) -> None:
        self.missing = tuple(sorted(set(missing)))
        super().__init__(
            f"Missing required columns: {', '.join(self.missing)}.",
            details={"missing_headers": list(self.missing)},
        )


class RecordWriteError(ImportPipelineError):
    """
    Raised by a record writer when one record cannot be persisted.
    """
