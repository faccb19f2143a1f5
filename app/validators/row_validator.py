"""
app/validators/row_validator.py

Row-level validation and normalization for financial imports.

Rules run in categories: shape, presence, format, reference. Every message
of the first failing category is reported so the uploader can fix the row
in one pass; later categories are skipped because their checks would only
repeat the same defect.
"""

from __future__ import annotations

import json
import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Callable
from urllib.parse import urlparse

from app.domain.concept_catalog import ConceptCatalog
from app.domain.financial_records import (
    AnalyticPnlRecord,
    AnnualPnlRecord,
    CompanyProfileRecord,
    DebtRecord,
    ValidatedRecord,
)
from app.domain.import_job import ParsedRow, RowValidationError, ScopeContext
from app.domain.import_kinds import FieldSpec, FieldType, ImportKindSpec, get_kind_spec
from db.models.import_job import ImportJobKind

_DECIMAL_PATTERN = re.compile(r"^[+-]?(\d+([.,]\d*)?|[.,]\d+)$")
_PERIOD_PATTERN = re.compile(r"^\d{4}(-(0[1-9]|1[0-2]))?$")
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_MIN_FOUNDED_YEAR = 1800
_ALLOWED_URL_SCHEMES = {"http", "https"}


def parse_decimal(raw: str) -> Decimal | None:
    """
    Parse a decimal accepting either '.' or ',' as the decimal separator.

    Thousands separators are not supported: '1,234' reads as 1.234.
    """

    candidate = raw.strip()
    if not _DECIMAL_PATTERN.match(candidate):
        return None
    try:
        return Decimal(candidate.replace(",", "."))
    except InvalidOperation:
        return None


class RowValidator:
    """
    Validates one parsed row for a job kind and builds its typed record.
    """

    def validate(
        self,
        *,
        row: ParsedRow,
        kind: str,
        catalog: ConceptCatalog,
        scope: ScopeContext,
    ) -> ValidatedRecord | RowValidationError:
        spec = get_kind_spec(kind)

        if len(row.values) != len(row.headers):
            return RowValidationError(
                row_number=row.row_number,
                messages=(
                    f"Row has {len(row.values)} columns but the header has {len(row.headers)}.",
                ),
            )

        raw = row.as_mapping()
        values = {
            field.column: (raw.get(field.column) or "").strip()
            for field in spec.fields
        }

        for check in (self._check_presence, self._check_formats):
            messages: list[str] = []
            parsed = check(spec=spec, values=values, messages=messages)
            if messages:
                return RowValidationError(row_number=row.row_number, messages=tuple(messages))

        messages = []
        self._check_references(
            spec=spec,
            values=values,
            catalog=catalog,
            scope=scope,
            messages=messages,
        )
        if messages:
            return RowValidationError(row_number=row.row_number, messages=tuple(messages))

        for column, default in spec.defaults.items():
            if parsed.get(column) is None:
                parsed[column] = default

        return _RECORD_BUILDERS[spec.kind](scope, parsed)

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def _check_presence(
        self,
        *,
        spec: ImportKindSpec,
        values: dict[str, str],
        messages: list[str],
    ) -> dict[str, Any]:
        for field in spec.fields:
            if field.required and not values[field.column]:
                messages.append(f"{field.column}: required value is missing.")
        return {}

    def _check_formats(
        self,
        *,
        spec: ImportKindSpec,
        values: dict[str, str],
        messages: list[str],
    ) -> dict[str, Any]:
        parsed: dict[str, Any] = {}
        for field in spec.fields:
            raw = values[field.column]
            if not raw:
                parsed[field.column] = None
                continue
            if field.max_length is not None and len(raw) > field.max_length:
                messages.append(
                    f"{field.column}: value is {len(raw)} characters long; "
                    f"maximum is {field.max_length}."
                )
                continue
            parsed[field.column] = self._parse_field(field=field, raw=raw, messages=messages)
        return parsed

    def _check_references(
        self,
        *,
        spec: ImportKindSpec,
        values: dict[str, str],
        catalog: ConceptCatalog,
        scope: ScopeContext,
        messages: list[str],
    ) -> None:
        for field in spec.fields:
            raw = values[field.column]
            if not raw:
                continue
            if field.field_type == FieldType.CONCEPT and raw not in catalog:
                messages.append(f"{field.column}: unknown concept code '{raw}'.")
            elif (field.field_type == FieldType.SCOPE_CODE and not scope.matches_code(raw)) or (
                field.field_type == FieldType.SCOPE_ALIAS and not scope.matches(raw)
            ):
                messages.append(
                    f"{field.column}: '{raw}' does not match the company this import belongs to."
                )

    # ------------------------------------------------------------------
    # Field parsers
    # ------------------------------------------------------------------

    def _parse_field(self, *, field: FieldSpec, raw: str, messages: list[str]) -> Any:
        field_type = field.field_type
        if field_type == FieldType.DECIMAL:
            return self._parse_number(field=field, raw=raw, messages=messages, integral=False)
        if field_type == FieldType.INTEGER:
            return self._parse_number(field=field, raw=raw, messages=messages, integral=True)
        if field_type == FieldType.YEAR:
            return self._parse_year(field=field, raw=raw, messages=messages)
        if field_type == FieldType.PERIOD:
            if not _PERIOD_PATTERN.match(raw):
                messages.append(f"{field.column}: '{raw}' must be a year (YYYY) or year-month (YYYY-MM).")
            return raw
        if field_type == FieldType.DATE:
            return self._parse_date(field=field, raw=raw, messages=messages)
        if field_type == FieldType.URL:
            return self._parse_url(field=field, raw=raw, messages=messages)
        if field_type == FieldType.JSON:
            return self._parse_json(field=field, raw=raw, messages=messages)
        return raw

    def _parse_number(
        self,
        *,
        field: FieldSpec,
        raw: str,
        messages: list[str],
        integral: bool,
    ) -> Decimal | int | None:
        value = parse_decimal(raw)
        if value is None:
            messages.append(f"{field.column}: '{raw}' is not a valid number.")
            return None
        if integral:
            if value != value.to_integral_value():
                messages.append(f"{field.column}: '{raw}' must be a whole number.")
                return None
        if not self._within_range(field=field, value=value, raw=raw, messages=messages):
            return None
        return int(value) if integral else value

    @staticmethod
    def _within_range(
        *,
        field: FieldSpec,
        value: Decimal,
        raw: str,
        messages: list[str],
    ) -> bool:
        if field.min_value is not None:
            if field.min_exclusive and value <= field.min_value:
                messages.append(f"{field.column}: '{raw}' must be greater than {field.min_value}.")
                return False
            if not field.min_exclusive and value < field.min_value:
                if field.max_value is not None:
                    messages.append(
                        f"{field.column}: '{raw}' must be between {field.min_value} and {field.max_value}."
                    )
                else:
                    messages.append(f"{field.column}: '{raw}' must be {field.min_value} or greater.")
                return False
        if field.max_value is not None and value > field.max_value:
            if field.min_value is not None:
                messages.append(
                    f"{field.column}: '{raw}' must be between {field.min_value} and {field.max_value}."
                )
            else:
                messages.append(f"{field.column}: '{raw}' must be {field.max_value} or less.")
            return False
        return True

    def _parse_year(self, *, field: FieldSpec, raw: str, messages: list[str]) -> int | None:
        current_year = date.today().year
        if not raw.isdigit() or not _MIN_FOUNDED_YEAR <= int(raw) <= current_year:
            messages.append(
                f"{field.column}: '{raw}' must be a year between {_MIN_FOUNDED_YEAR} and {current_year}."
            )
            return None
        return int(raw)

    @staticmethod
    def _parse_date(*, field: FieldSpec, raw: str, messages: list[str]) -> date | None:
        if _DATE_PATTERN.match(raw):
            try:
                return date.fromisoformat(raw)
            except ValueError:
                pass
        messages.append(f"{field.column}: '{raw}' must be a date in YYYY-MM-DD format.")
        return None

    @staticmethod
    def _parse_url(*, field: FieldSpec, raw: str, messages: list[str]) -> str | None:
        try:
            parsed = urlparse(raw)
        except ValueError:
            parsed = None
        if parsed is None or parsed.scheme.lower() not in _ALLOWED_URL_SCHEMES or not parsed.netloc:
            messages.append(f"{field.column}: '{raw}' is not an absolute http(s) URL.")
            return None
        return raw

    @staticmethod
    def _parse_json(*, field: FieldSpec, raw: str, messages: list[str]) -> Any:
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as exc:
            messages.append(f"{field.column}: invalid JSON ({exc.msg} at position {exc.pos}).")
            return None
        if not isinstance(parsed, (dict, list)):
            messages.append(f"{field.column}: JSON value must be an object or an array.")
            return None
        return parsed


# ---------------------------------------------------------------------------
# Record builders
# ---------------------------------------------------------------------------


def _build_annual_pnl(scope: ScopeContext, parsed: dict[str, Any]) -> AnnualPnlRecord:
    return AnnualPnlRecord(
        company_id=scope.company_id,
        year=parsed["anio"],
        concept_code=parsed["concepto_codigo"],
        total_value=parsed["valor_total"],
    )


def _build_analytic_pnl(scope: ScopeContext, parsed: dict[str, Any]) -> AnalyticPnlRecord:
    return AnalyticPnlRecord(
        company_id=scope.company_id,
        period=parsed["periodo"],
        concept_code=parsed["concepto_codigo"],
        value=parsed["valor"],
        segment=parsed["segmento"],
        cost_center=parsed["centro_coste"],
    )


def _build_company_profile(scope: ScopeContext, parsed: dict[str, Any]) -> CompanyProfileRecord:
    return CompanyProfileRecord(
        company_id=scope.company_id,
        sector=parsed["sector"],
        industry=parsed["industria"],
        founded_year=parsed["anio_fundacion"],
        employees=parsed["empleados"],
        annual_revenue=parsed["ingresos_anuales"],
        headquarters=parsed["sede"],
        website=parsed["sitio_web"],
        description=parsed["descripcion"],
        shareholder_structure=parsed["estructura_accionarial"],
        org_chart=parsed["organigrama"],
    )


def _build_debt(scope: ScopeContext, parsed: dict[str, Any]) -> DebtRecord:
    return DebtRecord(
        company_id=scope.company_id,
        entity=parsed["entidad"],
        debt_type=parsed["tipo"],
        capital=parsed["capital"],
        irr=parsed["tir"],
        term_months=parsed["plazo_meses"],
        installment=parsed["cuota"],
        next_maturity=parsed["proximo_venc"],
        scenario=parsed["escenario"],
    )


_RECORD_BUILDERS: dict[str, Callable[[ScopeContext, dict[str, Any]], ValidatedRecord]] = {
    ImportJobKind.ANNUAL_PNL: _build_annual_pnl,
    ImportJobKind.ANALYTIC_PNL: _build_analytic_pnl,
    ImportJobKind.COMPANY_PROFILE: _build_company_profile,
    ImportJobKind.DEBT_POOL: _build_debt,
}
