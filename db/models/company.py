"""
db/models/company.py

Company registry row. The import pipeline only reads it to resolve scope.
"""

from __future__ import annotations

import uuid

from sqlalchemy import Index, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class Company(Base, TimestampMixin):
    __tablename__ = "companies"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    company_code: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
        comment="Short code embedded in uploaded files (company_code / company_alias)",
    )

    __table_args__ = (Index("ix_companies_company_code", "company_code", unique=True),)
