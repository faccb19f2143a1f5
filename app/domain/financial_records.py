"""
app/domain/financial_records.py

Validated records, one frozen dataclass per import kind.

``ValidatedRecord`` is the tagged union produced by the row validator and
consumed by the record writer. ``natural_key`` is the business identity used
both for in-file duplicate detection and for the ON CONFLICT target.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Union

from db.models.import_job import ImportJobKind


@dataclass(frozen=True)
class AnnualPnlRecord:
    company_id: uuid.UUID
    year: str
    concept_code: str
    total_value: Decimal

    kind = ImportJobKind.ANNUAL_PNL

    @property
    def period(self) -> str:
        return self.year

    def natural_key(self) -> tuple[Any, ...]:
        return (self.company_id, self.year, self.concept_code)


@dataclass(frozen=True)
class AnalyticPnlRecord:
    company_id: uuid.UUID
    period: str
    concept_code: str
    value: Decimal
    segment: str | None = None
    cost_center: str | None = None

    kind = ImportJobKind.ANALYTIC_PNL

    def natural_key(self) -> tuple[Any, ...]:
        return (
            self.company_id,
            self.period,
            self.concept_code,
            self.segment or "",
            self.cost_center or "",
        )


@dataclass(frozen=True)
class CompanyProfileRecord:
    company_id: uuid.UUID
    sector: str | None = None
    industry: str | None = None
    founded_year: int | None = None
    employees: int | None = None
    annual_revenue: Decimal | None = None
    headquarters: str | None = None
    website: str | None = None
    description: str | None = None
    shareholder_structure: Any = None
    org_chart: Any = None

    kind = ImportJobKind.COMPANY_PROFILE
    period = None

    def natural_key(self) -> tuple[Any, ...]:
        return (self.company_id,)


@dataclass(frozen=True)
class DebtRecord:
    company_id: uuid.UUID
    entity: str
    debt_type: str
    capital: Decimal
    irr: Decimal | None = None
    term_months: int | None = None
    installment: Decimal | None = None
    next_maturity: date | None = None
    scenario: str = "base"

    kind = ImportJobKind.DEBT_POOL
    period = None

    def natural_key(self) -> tuple[Any, ...]:
        return (self.company_id, self.scenario, self.entity, self.debt_type)


ValidatedRecord = Union[AnnualPnlRecord, AnalyticPnlRecord, CompanyProfileRecord, DebtRecord]
