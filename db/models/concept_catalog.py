"""
db/models/concept_catalog.py

Reference catalog of P&L concept codes.
"""

from __future__ import annotations

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class PygConcept(Base):
    __tablename__ = "catalog_pyg_concepts"

    code: Mapped[str] = mapped_column(
        "concepto_codigo",
        String(64),
        primary_key=True,
    )
    name: Mapped[str] = mapped_column("concepto_nombre", String(255), nullable=False)
    group: Mapped[str | None] = mapped_column(
        "grupo",
        String(64),
        nullable=True,
        comment="e.g. INGRESOS, GASTOS_OPERATIVOS",
    )
    mandatory: Mapped[bool] = mapped_column(
        "obligatorio",
        Boolean,
        nullable=False,
        default=False,
    )
