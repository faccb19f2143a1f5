"""
app/api/dependencies.py

Shared FastAPI dependencies wiring request sessions to import services.
"""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.orm import Session

from app.services.import_orchestrator_service import ImportOrchestrator, build_import_orchestrator
from db.repositories.import_job_repository import ImportJobRepository
from db.session import get_db


def get_import_orchestrator(db: Session = Depends(get_db)) -> ImportOrchestrator:
    return build_import_orchestrator(db)


def get_import_job_repository(db: Session = Depends(get_db)) -> ImportJobRepository:
    return ImportJobRepository(db)
