"""
app/validators package marker.
"""

from app.validators.concept_auditor import AuditResult, ConceptAuditor
from app.validators.row_validator import RowValidator, parse_decimal

__all__ = [
    "AuditResult",
    "ConceptAuditor",
    "RowValidator",
    "parse_decimal",
]
