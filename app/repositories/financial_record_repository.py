"""
app/repositories/financial_record_repository.py

Upsert writer for validated financial records.

Every record is one ``INSERT ... ON CONFLICT DO UPDATE`` keyed by its natural
key and committed on its own, so rows accepted before a later failure stay
written. Re-running the same file therefore converges to the same state.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable

from sqlalchemy.dialects.postgresql import Insert, insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.financial_records import (
    AnalyticPnlRecord,
    AnnualPnlRecord,
    CompanyProfileRecord,
    DebtRecord,
    ValidatedRecord,
)
from app.errors import RecordWriteError
from db.models.financial_records import (
    DEBT_KEY,
    PNL_ANALYTIC_KEY,
    PNL_ANNUAL_KEY,
    CompanyProfile,
    DebtPosition,
    PnlAnalyticFact,
    PnlAnnualFact,
)

logger = logging.getLogger(__name__)


def _excluded(stmt: Insert, attribute: Any) -> Any:
    """Map an ORM attribute to the EXCLUDED pseudo-row column of the same table column."""
    return stmt.excluded[attribute.property.columns[0].key]


def _annual_pnl_upsert(record: AnnualPnlRecord) -> Insert:
    stmt = insert(PnlAnnualFact).values(
        {
            PnlAnnualFact.company_id: record.company_id,
            PnlAnnualFact.year: record.year,
            PnlAnnualFact.concept_code: record.concept_code,
            PnlAnnualFact.total_value: record.total_value,
        }
    )
    return stmt.on_conflict_do_update(
        constraint=PNL_ANNUAL_KEY,
        set_={PnlAnnualFact.total_value: _excluded(stmt, PnlAnnualFact.total_value)},
    )


def _analytic_pnl_upsert(record: AnalyticPnlRecord) -> Insert:
    stmt = insert(PnlAnalyticFact).values(
        {
            PnlAnalyticFact.company_id: record.company_id,
            PnlAnalyticFact.period: record.period,
            PnlAnalyticFact.concept_code: record.concept_code,
            PnlAnalyticFact.value: record.value,
            PnlAnalyticFact.segment: record.segment or "",
            PnlAnalyticFact.cost_center: record.cost_center or "",
        }
    )
    return stmt.on_conflict_do_update(
        constraint=PNL_ANALYTIC_KEY,
        set_={PnlAnalyticFact.value: _excluded(stmt, PnlAnalyticFact.value)},
    )


_PROFILE_VALUE_ATTRIBUTES = (
    "sector",
    "industry",
    "founded_year",
    "employees",
    "annual_revenue",
    "headquarters",
    "website",
    "description",
    "shareholder_structure",
    "org_chart",
)


def _company_profile_upsert(record: CompanyProfileRecord) -> Insert:
    attributes = [getattr(CompanyProfile, name) for name in _PROFILE_VALUE_ATTRIBUTES]
    values: dict[Any, Any] = {CompanyProfile.company_id: record.company_id}
    values.update(
        {attribute: getattr(record, name) for attribute, name in zip(attributes, _PROFILE_VALUE_ATTRIBUTES)}
    )
    stmt = insert(CompanyProfile).values(values)
    set_: dict[Any, Any] = {attribute: _excluded(stmt, attribute) for attribute in attributes}
    set_[CompanyProfile.updated_at] = datetime.now(timezone.utc)
    return stmt.on_conflict_do_update(index_elements=[CompanyProfile.company_id], set_=set_)


def _debt_upsert(record: DebtRecord) -> Insert:
    stmt = insert(DebtPosition).values(
        {
            DebtPosition.company_id: record.company_id,
            DebtPosition.entity: record.entity,
            DebtPosition.debt_type: record.debt_type,
            DebtPosition.capital: record.capital,
            DebtPosition.irr: record.irr,
            DebtPosition.term_months: record.term_months,
            DebtPosition.installment: record.installment,
            DebtPosition.next_maturity: record.next_maturity,
            DebtPosition.scenario: record.scenario,
        }
    )
    replaced = (
        DebtPosition.capital,
        DebtPosition.irr,
        DebtPosition.term_months,
        DebtPosition.installment,
        DebtPosition.next_maturity,
    )
    return stmt.on_conflict_do_update(
        constraint=DEBT_KEY,
        set_={attribute: _excluded(stmt, attribute) for attribute in replaced},
    )


_UPSERT_BUILDERS: dict[type, Callable[[Any], Insert]] = {
    AnnualPnlRecord: _annual_pnl_upsert,
    AnalyticPnlRecord: _analytic_pnl_upsert,
    CompanyProfileRecord: _company_profile_upsert,
    DebtRecord: _debt_upsert,
}


def build_upsert_statement(record: ValidatedRecord) -> Insert:
    """
    Return the ON CONFLICT statement that writes ``record``.
    """

    try:
        builder = _UPSERT_BUILDERS[type(record)]
    except KeyError:
        raise TypeError(f"No upsert handler for record type {type(record).__name__}") from None
    return builder(record)


class FinancialRecordRepository:
    """
    Writes validated records, committing after each one.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def write(self, record: ValidatedRecord) -> None:
        stmt = build_upsert_statement(record)
        try:
            self._session.execute(stmt)
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            logger.error(
                "Record upsert failed kind=%s company_id=%s error=%s",
                record.kind,
                record.company_id,
                exc,
            )
            raise RecordWriteError(
                f"Could not store {record.kind} record: {exc.__class__.__name__}."
            ) from exc
