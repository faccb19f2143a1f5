"""
app/repositories package marker.
"""

from app.repositories.concept_catalog_repository import CompanyScopeRepository, ConceptCatalogRepository
from app.repositories.financial_record_repository import FinancialRecordRepository

__all__ = [
    "CompanyScopeRepository",
    "ConceptCatalogRepository",
    "FinancialRecordRepository",
]
