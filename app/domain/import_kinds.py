"""
app/domain/import_kinds.py

Per-kind file layout: columns, how each is parsed, which are mandatory, and
which cross-row audits apply.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from db.models.import_job import ImportJobKind


class FieldType:
    TEXT = "text"
    DECIMAL = "decimal"
    INTEGER = "integer"
    YEAR = "year"
    PERIOD = "period"
    DATE = "date"
    URL = "url"
    JSON = "json"
    CONCEPT = "concept"
    SCOPE_CODE = "scope_code"
    SCOPE_ALIAS = "scope_alias"


@dataclass(frozen=True)
class FieldSpec:
    """
    One file column. ``required`` means the value must be non-empty;
    ``header_required`` means the column must exist in the header row.
    """

    column: str
    field_type: str = FieldType.TEXT
    required: bool = False
    header_required: bool = True
    min_value: Decimal | None = None
    max_value: Decimal | None = None
    min_exclusive: bool = False
    max_length: int | None = None


@dataclass(frozen=True)
class ImportKindSpec:
    kind: str
    fields: tuple[FieldSpec, ...]
    uses_catalog: bool = False
    audits_mandatory_concepts: bool = False
    required_concept_groups: tuple[str, ...] = ()
    checks_sign_conventions: bool = False
    expects_income_concept: bool = False
    defaults: dict[str, str] = field(default_factory=dict)

    @property
    def required_headers(self) -> tuple[str, ...]:
        return tuple(spec.column for spec in self.fields if spec.header_required)

    def missing_headers(self, headers: tuple[str, ...]) -> list[str]:
        present = set(headers)
        return sorted({column for column in self.required_headers if column not in present})


_ZERO = Decimal("0")

ANNUAL_PNL_SPEC = ImportKindSpec(
    kind=ImportJobKind.ANNUAL_PNL,
    fields=(
        FieldSpec("anio", FieldType.PERIOD, required=True),
        FieldSpec("concepto_codigo", FieldType.CONCEPT, required=True),
        FieldSpec("valor_total", FieldType.DECIMAL, required=True),
    ),
    uses_catalog=True,
    audits_mandatory_concepts=True,
    required_concept_groups=("GASTOS_OPERATIVOS",),
    checks_sign_conventions=True,
)

ANALYTIC_PNL_SPEC = ImportKindSpec(
    kind=ImportJobKind.ANALYTIC_PNL,
    fields=(
        FieldSpec("company_code", FieldType.SCOPE_CODE, required=True),
        FieldSpec("periodo", FieldType.PERIOD, required=True),
        FieldSpec("concepto_codigo", FieldType.CONCEPT, required=True),
        FieldSpec("valor", FieldType.DECIMAL, required=True),
        FieldSpec("segmento", header_required=False, max_length=120),
        FieldSpec("centro_coste", header_required=False, max_length=120),
    ),
    uses_catalog=True,
    expects_income_concept=True,
)

COMPANY_PROFILE_SPEC = ImportKindSpec(
    kind=ImportJobKind.COMPANY_PROFILE,
    fields=(
        FieldSpec("company_alias", FieldType.SCOPE_ALIAS, required=True),
        FieldSpec("sector", max_length=255),
        FieldSpec("industria", max_length=255),
        FieldSpec("anio_fundacion", FieldType.YEAR),
        FieldSpec("empleados", FieldType.INTEGER, min_value=_ZERO),
        FieldSpec("ingresos_anuales", FieldType.DECIMAL, min_value=_ZERO),
        FieldSpec("sede", max_length=255),
        FieldSpec("sitio_web", FieldType.URL, max_length=512),
        FieldSpec("descripcion"),
        FieldSpec("estructura_accionarial", FieldType.JSON),
        FieldSpec("organigrama", FieldType.JSON),
    ),
)

DEBT_POOL_SPEC = ImportKindSpec(
    kind=ImportJobKind.DEBT_POOL,
    fields=(
        FieldSpec("entidad", required=True, max_length=255),
        FieldSpec("tipo", required=True, max_length=100),
        FieldSpec("capital", FieldType.DECIMAL, required=True, min_value=_ZERO, min_exclusive=True),
        FieldSpec("tir", FieldType.DECIMAL, min_value=_ZERO, max_value=Decimal("100")),
        FieldSpec("plazo_meses", FieldType.INTEGER, min_value=_ZERO),
        FieldSpec("cuota", FieldType.DECIMAL, min_value=_ZERO),
        FieldSpec("proximo_venc", FieldType.DATE),
        FieldSpec("escenario", header_required=False, max_length=50),
    ),
    defaults={"escenario": "base"},
)

KIND_SPECS: dict[str, ImportKindSpec] = {
    spec.kind: spec
    for spec in (ANNUAL_PNL_SPEC, ANALYTIC_PNL_SPEC, COMPANY_PROFILE_SPEC, DEBT_POOL_SPEC)
}


def get_kind_spec(kind: str) -> ImportKindSpec:
    try:
        return KIND_SPECS[kind]
    except KeyError:
        raise ValueError(f"Unknown import job kind: {kind!r}") from None
