"""
db/models/import_job.py

Import job record: lifecycle state and the per-run summary of one uploaded file.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class ImportJobKind:
    ANNUAL_PNL = "pyg_anual"
    ANALYTIC_PNL = "pyg_analytic"
    COMPANY_PROFILE = "company_profile"
    DEBT_POOL = "debt_pool"

    ALL = frozenset({ANNUAL_PNL, ANALYTIC_PNL, COMPANY_PROFILE, DEBT_POOL})


class ImportJobStatus:
    PENDING = "pending"
    PROCESSING = "processing"
    DONE = "done"
    FAILED = "failed"

    TERMINAL = frozenset({DONE, FAILED})


class ImportJob(Base, TimestampMixin):
    __tablename__ = "import_jobs"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    company_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
        comment="Owning company (scope) of the imported data",
    )
    kind: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="pyg_anual, pyg_analytic, company_profile, debt_pool",
    )
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=ImportJobStatus.PENDING,
    )
    storage_path: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
        comment="Object storage path assigned at upload time; never rewritten",
    )
    file_format: Mapped[str | None] = mapped_column(
        String(8),
        nullable=True,
        comment="csv, xlsx, xls; resolved from storage_path when null",
    )
    summary: Mapped[dict[str, Any] | None] = mapped_column(
        JSONB,
        nullable=True,
        comment="Terminal run summary: counters, errors, warnings",
    )
    total_rows: Mapped[int | None] = mapped_column(Integer, nullable=True)
    ok_rows: Mapped[int | None] = mapped_column(Integer, nullable=True)
    error_rows: Mapped[int | None] = mapped_column(Integer, nullable=True)
    started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    __table_args__ = (
        Index("ix_import_jobs_company_id", "company_id"),
        Index("ix_import_jobs_status", "status"),
        Index("ix_import_jobs_created_at", "created_at"),
        Index("ix_import_jobs_company_kind", "company_id", "kind"),
    )
