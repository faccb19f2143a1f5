"""
app/schemas package marker.
"""

from app.schemas.import_jobs import (
    ImportJobListResponse,
    ImportJobStatusResponse,
    ImportRunRequest,
    ImportRunResponse,
    ImportSummaryResponse,
    RowErrorResponse,
)

__all__ = [
    "ImportJobListResponse",
    "ImportJobStatusResponse",
    "ImportRunRequest",
    "ImportRunResponse",
    "ImportSummaryResponse",
    "RowErrorResponse",
]
