"""
app/validators/concept_auditor.py

Cross-row audit of the accepted record set of one import.

Runs once after row processing. Missing mandatory concepts and missing
required concept groups are job-level errors (row 0); sign conventions and
the analytic income check only produce warnings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from app.domain.concept_catalog import ConceptCatalog
from app.domain.financial_records import ValidatedRecord
from app.domain.import_job import RowValidationError
from app.domain.import_kinds import get_kind_spec

POSITIVE_CONCEPTS = frozenset({"PYG_INGRESOS", "PYG_OTROS_INGRESOS_OP", "PYG_INGRESOS_FIN"})
NEGATIVE_CONCEPT_MARKERS = ("COSTE", "GASTO", "DEPRECIACION", "AMORTIZACION")
INCOME_MARKER = "INGRESO"


@dataclass
class AuditResult:
    errors: list[RowValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class ConceptAuditor:
    """
    Audits accepted records against the concept catalog.
    """

    def audit(
        self,
        *,
        records: Sequence[ValidatedRecord],
        catalog: ConceptCatalog,
        kind: str,
    ) -> AuditResult:
        spec = get_kind_spec(kind)
        result = AuditResult()

        groups = self._group_by_scope_and_period(records) if spec.uses_catalog else {}

        if spec.audits_mandatory_concepts:
            self._check_mandatory_concepts(groups=groups, catalog=catalog, result=result)
        for group_name in spec.required_concept_groups:
            self._check_required_group(
                groups=groups,
                catalog=catalog,
                group_name=group_name,
                result=result,
            )
        if spec.checks_sign_conventions:
            self._check_sign_conventions(records=records, result=result)
        if spec.expects_income_concept and records:
            codes = {getattr(record, "concept_code", "") for record in records}
            if not any(INCOME_MARKER in code for code in codes):
                result.warnings.append(
                    "No income concept (code containing 'INGRESO') was imported."
                )

        return result

    @staticmethod
    def _group_by_scope_and_period(
        records: Sequence[ValidatedRecord],
    ) -> dict[tuple[Any, str], set[str]]:
        groups: dict[tuple[Any, str], set[str]] = {}
        for record in records:
            key = (record.company_id, record.period)
            groups.setdefault(key, set()).add(record.concept_code)
        return groups

    @staticmethod
    def _check_mandatory_concepts(
        *,
        groups: dict[tuple[Any, str], set[str]],
        catalog: ConceptCatalog,
        result: AuditResult,
    ) -> None:
        mandatory = catalog.mandatory_entries()
        for (_, period), codes in sorted(groups.items(), key=lambda item: item[0][1]):
            for entry in mandatory:
                if entry.code not in codes:
                    result.errors.append(
                        RowValidationError.job_level(
                            f"Period {period}: missing mandatory concept '{entry.code}' ({entry.name})."
                        )
                    )

    @staticmethod
    def _check_required_group(
        *,
        groups: dict[tuple[Any, str], set[str]],
        catalog: ConceptCatalog,
        group_name: str,
        result: AuditResult,
    ) -> None:
        group_codes = catalog.codes_in_group(group_name)
        if not group_codes:
            return
        for (_, period), codes in sorted(groups.items(), key=lambda item: item[0][1]):
            if not codes & group_codes:
                result.errors.append(
                    RowValidationError.job_level(
                        f"Period {period}: at least one concept of group '{group_name}' is required."
                    )
                )

    @staticmethod
    def _check_sign_conventions(
        *,
        records: Sequence[ValidatedRecord],
        result: AuditResult,
    ) -> None:
        for record in records:
            code = record.concept_code
            value = record.total_value
            if code in POSITIVE_CONCEPTS and value <= 0:
                result.warnings.append(
                    f"Period {record.period}: concept '{code}' is usually positive (got {value})."
                )
            elif any(marker in code for marker in NEGATIVE_CONCEPT_MARKERS) and value >= 0:
                result.warnings.append(
                    f"Period {record.period}: concept '{code}' is usually negative (got {value})."
                )
