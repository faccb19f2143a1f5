"""
app/domain package marker.
"""

from app.domain.concept_catalog import ConceptCatalog, ConceptCatalogEntry
from app.domain.financial_records import (
    AnalyticPnlRecord,
    AnnualPnlRecord,
    CompanyProfileRecord,
    DebtRecord,
    ValidatedRecord,
)
from app.domain.import_job import (
    ImportJobSnapshot,
    JobSummary,
    ParsedFile,
    ParsedRow,
    RowValidationError,
    ScopeContext,
)
from app.domain.import_kinds import ImportKindSpec, get_kind_spec

__all__ = [
    "AnalyticPnlRecord",
    "AnnualPnlRecord",
    "CompanyProfileRecord",
    "ConceptCatalog",
    "ConceptCatalogEntry",
    "DebtRecord",
    "ImportJobSnapshot",
    "ImportKindSpec",
    "JobSummary",
    "ParsedFile",
    "ParsedRow",
    "RowValidationError",
    "ScopeContext",
    "ValidatedRecord",
    "get_kind_spec",
]
