"""create import pipeline tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "companies",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("company_code", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_companies"),
    )
    op.create_index("ix_companies_company_code", "companies", ["company_code"], unique=True)

    op.create_table(
        "catalog_pyg_concepts",
        sa.Column("concepto_codigo", sa.String(length=64), nullable=False),
        sa.Column("concepto_nombre", sa.String(length=255), nullable=False),
        sa.Column("grupo", sa.String(length=64), nullable=True),
        sa.Column("obligatorio", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint("concepto_codigo", name="pk_catalog_pyg_concepts"),
    )

    op.create_table(
        "import_jobs",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("company_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("kind", sa.String(length=32), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("storage_path", sa.String(length=1024), nullable=False),
        sa.Column("file_format", sa.String(length=8), nullable=True),
        sa.Column("summary", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("total_rows", sa.Integer(), nullable=True),
        sa.Column("ok_rows", sa.Integer(), nullable=True),
        sa.Column("error_rows", sa.Integer(), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_import_jobs"),
    )
    op.create_index("ix_import_jobs_company_id", "import_jobs", ["company_id"], unique=False)
    op.create_index("ix_import_jobs_status", "import_jobs", ["status"], unique=False)
    op.create_index("ix_import_jobs_created_at", "import_jobs", ["created_at"], unique=False)
    op.create_index("ix_import_jobs_company_kind", "import_jobs", ["company_id", "kind"], unique=False)

    op.create_table(
        "pyg_annual",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("company_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("anio", sa.String(length=7), nullable=False),
        sa.Column("concepto_codigo", sa.String(length=64), nullable=False),
        sa.Column("valor_total", sa.Numeric(20, 2), nullable=False),
        sa.Column("creado_en", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_pyg_annual"),
        sa.UniqueConstraint(
            "company_id",
            "anio",
            "concepto_codigo",
            name="uq_pyg_annual_company_year_concept",
        ),
    )

    op.create_table(
        "pyg_analytic",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("company_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("periodo", sa.String(length=7), nullable=False),
        sa.Column("concepto_codigo", sa.String(length=64), nullable=False),
        sa.Column("valor", sa.Numeric(20, 2), nullable=False),
        sa.Column("segmento", sa.String(length=120), server_default="", nullable=False),
        sa.Column("centro_coste", sa.String(length=120), server_default="", nullable=False),
        sa.Column("creado_en", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_pyg_analytic"),
        sa.UniqueConstraint(
            "company_id",
            "periodo",
            "concepto_codigo",
            "segmento",
            "centro_coste",
            name="uq_pyg_analytic_company_period_concept_dims",
        ),
    )

    op.create_table(
        "company_profiles",
        sa.Column("company_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("sector", sa.String(length=255), nullable=True),
        sa.Column("industria", sa.String(length=255), nullable=True),
        sa.Column("anio_fundacion", sa.Integer(), nullable=True),
        sa.Column("empleados", sa.Integer(), nullable=True),
        sa.Column("ingresos_anuales", sa.Numeric(20, 2), nullable=True),
        sa.Column("sede", sa.String(length=255), nullable=True),
        sa.Column("sitio_web", sa.String(length=512), nullable=True),
        sa.Column("descripcion", sa.Text(), nullable=True),
        sa.Column("estructura_accionarial", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("organigrama", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("company_id", name="pk_company_profiles"),
    )

    op.create_table(
        "debts",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("company_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("entidad", sa.String(length=255), nullable=False),
        sa.Column("tipo", sa.String(length=100), nullable=False),
        sa.Column("capital", sa.Numeric(20, 2), nullable=False),
        sa.Column("tir", sa.Numeric(7, 4), nullable=True),
        sa.Column("plazo_meses", sa.Integer(), nullable=True),
        sa.Column("cuota", sa.Numeric(20, 2), nullable=True),
        sa.Column("proximo_venc", sa.Date(), nullable=True),
        sa.Column("escenario", sa.String(length=50), server_default="base", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_debts"),
        sa.UniqueConstraint(
            "company_id",
            "escenario",
            "entidad",
            "tipo",
            name="uq_debts_company_scenario_entity_type",
        ),
    )


def downgrade() -> None:
    op.drop_table("debts")
    op.drop_table("company_profiles")
    op.drop_table("pyg_analytic")
    op.drop_table("pyg_annual")
    op.drop_index("ix_import_jobs_company_kind", table_name="import_jobs")
    op.drop_index("ix_import_jobs_created_at", table_name="import_jobs")
    op.drop_index("ix_import_jobs_status", table_name="import_jobs")
    op.drop_index("ix_import_jobs_company_id", table_name="import_jobs")
    op.drop_table("import_jobs")
    op.drop_table("catalog_pyg_concepts")
    op.drop_index("ix_companies_company_code", table_name="companies")
    op.drop_table("companies")
