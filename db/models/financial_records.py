"""
db/models/financial_records.py

Target tables written by the import pipeline. Each carries the natural key
used for ON CONFLICT upserts.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import Date, DateTime, Integer, Numeric, String, Text, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin

PNL_ANNUAL_KEY = "uq_pyg_annual_company_year_concept"
PNL_ANALYTIC_KEY = "uq_pyg_analytic_company_period_concept_dims"
DEBT_KEY = "uq_debts_company_scenario_entity_type"


class PnlAnnualFact(Base):
    __tablename__ = "pyg_annual"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    company_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    year: Mapped[str] = mapped_column("anio", String(7), nullable=False)
    concept_code: Mapped[str] = mapped_column("concepto_codigo", String(64), nullable=False)
    total_value: Mapped[Decimal] = mapped_column("valor_total", Numeric(20, 2), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        "creado_en",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        UniqueConstraint("company_id", "anio", "concepto_codigo", name=PNL_ANNUAL_KEY),
    )


class PnlAnalyticFact(Base):
    __tablename__ = "pyg_analytic"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    company_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    period: Mapped[str] = mapped_column("periodo", String(7), nullable=False)
    concept_code: Mapped[str] = mapped_column("concepto_codigo", String(64), nullable=False)
    value: Mapped[Decimal] = mapped_column("valor", Numeric(20, 2), nullable=False)
    # Empty string, not NULL, so the unique key also covers rows without dimensions.
    segment: Mapped[str] = mapped_column(
        "segmento",
        String(120),
        nullable=False,
        default="",
        server_default="",
    )
    cost_center: Mapped[str] = mapped_column(
        "centro_coste",
        String(120),
        nullable=False,
        default="",
        server_default="",
    )
    created_at: Mapped[datetime] = mapped_column(
        "creado_en",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        UniqueConstraint(
            "company_id",
            "periodo",
            "concepto_codigo",
            "segmento",
            "centro_coste",
            name=PNL_ANALYTIC_KEY,
        ),
    )


class CompanyProfile(Base, TimestampMixin):
    __tablename__ = "company_profiles"

    company_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True)
    sector: Mapped[str | None] = mapped_column(String(255), nullable=True)
    industry: Mapped[str | None] = mapped_column("industria", String(255), nullable=True)
    founded_year: Mapped[int | None] = mapped_column("anio_fundacion", Integer, nullable=True)
    employees: Mapped[int | None] = mapped_column("empleados", Integer, nullable=True)
    annual_revenue: Mapped[Decimal | None] = mapped_column(
        "ingresos_anuales",
        Numeric(20, 2),
        nullable=True,
    )
    headquarters: Mapped[str | None] = mapped_column("sede", String(255), nullable=True)
    website: Mapped[str | None] = mapped_column("sitio_web", String(512), nullable=True)
    description: Mapped[str | None] = mapped_column("descripcion", Text, nullable=True)
    shareholder_structure: Mapped[Any | None] = mapped_column(
        "estructura_accionarial",
        JSONB,
        nullable=True,
    )
    org_chart: Mapped[Any | None] = mapped_column("organigrama", JSONB, nullable=True)


class DebtPosition(Base):
    __tablename__ = "debts"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    company_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    entity: Mapped[str] = mapped_column("entidad", String(255), nullable=False)
    debt_type: Mapped[str] = mapped_column("tipo", String(100), nullable=False)
    capital: Mapped[Decimal] = mapped_column(Numeric(20, 2), nullable=False)
    irr: Mapped[Decimal | None] = mapped_column("tir", Numeric(7, 4), nullable=True)
    term_months: Mapped[int | None] = mapped_column("plazo_meses", Integer, nullable=True)
    installment: Mapped[Decimal | None] = mapped_column("cuota", Numeric(20, 2), nullable=True)
    next_maturity: Mapped[date | None] = mapped_column("proximo_venc", Date, nullable=True)
    scenario: Mapped[str] = mapped_column(
        "escenario",
        String(50),
        nullable=False,
        default="base",
        server_default="base",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        UniqueConstraint("company_id", "escenario", "entidad", "tipo", name=DEBT_KEY),
    )
