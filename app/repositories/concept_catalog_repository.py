"""
app/repositories/concept_catalog_repository.py

Read access to the P&L concept catalog and to company scope.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.domain.concept_catalog import ConceptCatalog, ConceptCatalogEntry
from app.domain.import_job import ScopeContext
from db.models.company import Company
from db.models.concept_catalog import PygConcept

logger = logging.getLogger(__name__)


class ConceptCatalogRepository:
    """
    Loads the whole concept catalog; it is small and read once per job.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def load_catalog(self) -> ConceptCatalog:
        rows = self._session.scalars(select(PygConcept).order_by(PygConcept.code)).all()
        logger.debug("Loaded concept catalog entries=%d", len(rows))
        return ConceptCatalog(
            ConceptCatalogEntry(
                code=row.code,
                name=row.name,
                group=row.group,
                mandatory=bool(row.mandatory),
            )
            for row in rows
        )


class CompanyScopeRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def get_scope(self, company_id: uuid.UUID) -> ScopeContext | None:
        company = self._session.get(Company, company_id)
        if company is None:
            return None
        return ScopeContext(
            company_id=company.id,
            company_code=company.company_code,
            name=company.name,
        )
