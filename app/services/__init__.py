"""
app/services package marker.
"""

from app.services.import_orchestrator_service import (
    ImportOrchestrator,
    ImportRunResult,
    build_import_orchestrator,
    run_import_job,
)

__all__ = [
    "ImportOrchestrator",
    "ImportRunResult",
    "build_import_orchestrator",
    "run_import_job",
]
