"""
tests/test_concept_auditor.py

Pytest unit tests for the cross-row concept audit.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

import pytest

from app.domain.concept_catalog import ConceptCatalog, ConceptCatalogEntry
from app.domain.financial_records import AnalyticPnlRecord, AnnualPnlRecord, DebtRecord
from app.validators.concept_auditor import ConceptAuditor
from db.models.import_job import ImportJobKind

ACME_ID = uuid.UUID("00000000-0000-0000-0000-00000000a001")


@pytest.fixture()
def auditor() -> ConceptAuditor:
    return ConceptAuditor()


def _annual(year: str, code: str, value: str = "100") -> AnnualPnlRecord:
    return AnnualPnlRecord(company_id=ACME_ID, year=year, concept_code=code, total_value=Decimal(value))


def _complete_year(year: str) -> list[AnnualPnlRecord]:
    return [
        _annual(year, "PYG_INGRESOS", "1000"),
        _annual(year, "PYG_COSTE_VENTAS", "-400"),
        _annual(year, "PYG_RESULTADO_NETO", "600"),
    ]


class TestMandatoryConcepts:
    def test_complete_period_passes(self, auditor: ConceptAuditor, catalog: ConceptCatalog) -> None:
        result = auditor.audit(records=_complete_year("2024"), catalog=catalog, kind=ImportJobKind.ANNUAL_PNL)

        assert result.errors == []
        assert result.warnings == []

    def test_each_missing_mandatory_concept_is_one_error_per_period(
        self, auditor: ConceptAuditor, catalog: ConceptCatalog
    ) -> None:
        records = _complete_year("2024") + [
            _annual("2023", "PYG_COSTE_VENTAS", "-10"),
        ]
        result = auditor.audit(records=records, catalog=catalog, kind=ImportJobKind.ANNUAL_PNL)

        assert [error.row_number for error in result.errors] == [0, 0]
        assert [error.messages for error in result.errors] == [
            ("Period 2023: missing mandatory concept 'PYG_INGRESOS' (Ingresos de explotacion).",),
            ("Period 2023: missing mandatory concept 'PYG_RESULTADO_NETO' (Resultado neto).",),
        ]

    def test_no_records_means_no_groups_to_audit(
        self, auditor: ConceptAuditor, catalog: ConceptCatalog
    ) -> None:
        result = auditor.audit(records=[], catalog=catalog, kind=ImportJobKind.ANNUAL_PNL)
        assert result.errors == []


class TestRequiredGroups:
    def test_missing_operating_expense_group_is_an_error(
        self, auditor: ConceptAuditor, catalog: ConceptCatalog
    ) -> None:
        records = [
            _annual("2024", "PYG_INGRESOS", "1000"),
            _annual("2024", "PYG_RESULTADO_NETO", "1000"),
        ]
        result = auditor.audit(records=records, catalog=catalog, kind=ImportJobKind.ANNUAL_PNL)

        assert [error.messages for error in result.errors] == [
            ("Period 2024: at least one concept of group 'GASTOS_OPERATIVOS' is required.",),
        ]

    def test_group_check_is_skipped_when_catalog_has_no_such_group(
        self, auditor: ConceptAuditor
    ) -> None:
        catalog = ConceptCatalog([ConceptCatalogEntry("PYG_INGRESOS", "Ingresos", mandatory=True)])
        result = auditor.audit(
            records=[_annual("2024", "PYG_INGRESOS")],
            catalog=catalog,
            kind=ImportJobKind.ANNUAL_PNL,
        )

        assert result.errors == []


class TestSignConventions:
    def test_sign_mismatches_are_warnings_only(
        self, auditor: ConceptAuditor, catalog: ConceptCatalog
    ) -> None:
        records = [
            _annual("2024", "PYG_INGRESOS", "-1000"),
            _annual("2024", "PYG_COSTE_VENTAS", "400"),
            _annual("2024", "PYG_AMORTIZACION", "50"),
            _annual("2024", "PYG_RESULTADO_NETO", "-650"),
        ]
        result = auditor.audit(records=records, catalog=catalog, kind=ImportJobKind.ANNUAL_PNL)

        assert result.errors == []
        assert result.warnings == [
            "Period 2024: concept 'PYG_INGRESOS' is usually positive (got -1000).",
            "Period 2024: concept 'PYG_COSTE_VENTAS' is usually negative (got 400).",
            "Period 2024: concept 'PYG_AMORTIZACION' is usually negative (got 50).",
        ]

    def test_zero_values_break_sign_conventions(
        self, auditor: ConceptAuditor, catalog: ConceptCatalog
    ) -> None:
        records = [
            _annual("2024", "PYG_INGRESOS", "0"),
            _annual("2024", "PYG_COSTE_VENTAS", "0"),
            _annual("2024", "PYG_RESULTADO_NETO", "0"),
        ]
        result = auditor.audit(records=records, catalog=catalog, kind=ImportJobKind.ANNUAL_PNL)

        assert result.errors == []
        assert result.warnings == [
            "Period 2024: concept 'PYG_INGRESOS' is usually positive (got 0).",
            "Period 2024: concept 'PYG_COSTE_VENTAS' is usually negative (got 0).",
        ]


class TestOtherKinds:
    def test_analytic_without_income_concept_warns(
        self, auditor: ConceptAuditor, catalog: ConceptCatalog
    ) -> None:
        records = [
            AnalyticPnlRecord(
                company_id=ACME_ID,
                period="2024-01",
                concept_code="PYG_COSTE_VENTAS",
                value=Decimal("-10"),
            )
        ]
        result = auditor.audit(records=records, catalog=catalog, kind=ImportJobKind.ANALYTIC_PNL)

        assert result.errors == []
        assert result.warnings == ["No income concept (code containing 'INGRESO') was imported."]

    def test_analytic_does_not_require_mandatory_concepts(
        self, auditor: ConceptAuditor, catalog: ConceptCatalog
    ) -> None:
        records = [
            AnalyticPnlRecord(
                company_id=ACME_ID,
                period="2024-01",
                concept_code="PYG_OTROS_INGRESOS_OP",
                value=Decimal("10"),
            )
        ]
        result = auditor.audit(records=records, catalog=catalog, kind=ImportJobKind.ANALYTIC_PNL)

        assert result.errors == []
        assert result.warnings == []

    def test_debt_pool_is_not_audited(self, auditor: ConceptAuditor, catalog: ConceptCatalog) -> None:
        records = [
            DebtRecord(company_id=ACME_ID, entity="Banco", debt_type="prestamo", capital=Decimal("1")),
        ]
        result = auditor.audit(records=records, catalog=catalog, kind=ImportJobKind.DEBT_POOL)

        assert result.errors == []
        assert result.warnings == []
