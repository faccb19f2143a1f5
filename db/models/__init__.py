"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.company import Company
from db.models.concept_catalog import PygConcept
from db.models.financial_records import CompanyProfile, DebtPosition, PnlAnalyticFact, PnlAnnualFact
from db.models.import_job import ImportJob, ImportJobKind, ImportJobStatus

__all__ = [
    "Company",
    "PygConcept",
    "ImportJob",
    "ImportJobKind",
    "ImportJobStatus",
    "PnlAnnualFact",
    "PnlAnalyticFact",
    "CompanyProfile",
    "DebtPosition",
]
