"""Staging record schemas and the scoped snapshot container.

Each staging table is modelled as its own frozen dataclass. All variants share
the scope/lifecycle fields of ``StagingRecord`` and carry a class-level
``domain`` tag, so callers dispatch on the tag instead of probing fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import date, datetime
from typing import Any, ClassVar, Dict, Iterable, List, Mapping, Optional, Type

from .enums import EmploymentStatus, PaymentStatus, RecordStatus, StagingDomain


@dataclass(frozen=True, kw_only=True)
class StagingRecord:
    """Fields shared by every staging record.

    Attributes:
        id: Record identifier, unique within its table.
        org_unit_code: Branch the record belongs to.
        period_ym: Calendar period key ("YYYY-MM").
        user_id: Author of the record.
        status: Lifecycle status (draft, submitted, approved).
        created_at: Creation timestamp, if known.
        updated_at: Last update timestamp, if known.
    """

    domain: ClassVar[StagingDomain]

    id: str
    org_unit_code: str
    period_ym: str
    user_id: str
    status: RecordStatus = RecordStatus.DRAFT
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_approved(self) -> bool:
        return self.status == RecordStatus.APPROVED


@dataclass(frozen=True, kw_only=True)
class ContingentRecord(StagingRecord):
    """One class (group of students) and its tuition tariff."""

    domain: ClassVar[StagingDomain] = StagingDomain.CONTINGENT

    program_name: str
    grade_level: str
    student_count: int
    funding_source: str
    education_profile: str = ""
    language: str = ""
    tariff_amount: Optional[float] = None
    calculation_note: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class IncomeAccrualRecord(StagingRecord):
    domain: ClassVar[StagingDomain] = StagingDomain.ACCRUALS

    funding_source: str
    article_code: str
    accrual_amount: float
    accrual_date: date
    calculation_base: Optional[str] = None
    contingent_source_id: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class CashScheduleRecord(StagingRecord):
    """A planned cash receipt.

    ``expected_date`` drives overdue alerts; ``payment_date`` and ``doc_date``
    become the transaction and document dates of the cash-flow ledger line.
    """

    domain: ClassVar[StagingDomain] = StagingDomain.CASH_SCHEDULE

    funding_source: str
    article_code: str
    amount: float
    expected_date: date
    payment_date: date
    doc_date: date
    payment_method: str
    payment_status: PaymentStatus = PaymentStatus.PENDING
    description: Optional[str] = None
    income_accrual_id: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class StaffingRecord(StagingRecord):
    domain: ClassVar[StagingDomain] = StagingDomain.STAFFING

    employee_id: str
    full_name: str
    position: str
    base_salary: float
    bonus: float = 0.0
    allowances: float = 0.0
    total_salary: float = 0.0
    employment_status: EmploymentStatus = EmploymentStatus.ACTIVE
    funding_source: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class TripRecord(StagingRecord):
    domain: ClassVar[StagingDomain] = StagingDomain.TRIPS

    employee_name: str
    destination: str
    start_date: date
    end_date: date
    total_amount: float
    purpose: Optional[str] = None
    is_international: bool = False
    funding_source: Optional[str] = None
    article_code: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class UtilityCalculationRecord(StagingRecord):
    domain: ClassVar[StagingDomain] = StagingDomain.CALCULATIONS

    service_name: str
    calculation_method: str
    calculated_amount: float
    calculation_date: date
    funding_source: Optional[str] = None
    article_code: Optional[str] = None


RECORD_TYPES: Dict[StagingDomain, Type[StagingRecord]] = {
    StagingDomain.CONTINGENT: ContingentRecord,
    StagingDomain.ACCRUALS: IncomeAccrualRecord,
    StagingDomain.CASH_SCHEDULE: CashScheduleRecord,
    StagingDomain.STAFFING: StaffingRecord,
    StagingDomain.TRIPS: TripRecord,
    StagingDomain.CALCULATIONS: UtilityCalculationRecord,
}

_DATE_FIELDS = {
    "accrual_date",
    "expected_date",
    "payment_date",
    "doc_date",
    "start_date",
    "end_date",
    "calculation_date",
}
_DATETIME_FIELDS = {"created_at", "updated_at"}
_ENUM_FIELDS = {
    "status": RecordStatus,
    "payment_status": PaymentStatus,
    "employment_status": EmploymentStatus,
}


def _coerce(name: str, value: Any) -> Any:
    if value is None:
        return None
    if name in _DATE_FIELDS:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        return date.fromisoformat(str(value))
    if name in _DATETIME_FIELDS:
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime(value.year, value.month, value.day)
        return datetime.fromisoformat(str(value))
    if name in _ENUM_FIELDS:
        return _ENUM_FIELDS[name](value)
    if name == "grade_level":
        return str(value)
    return value


def record_from_dict(domain: StagingDomain, data: Mapping[str, Any]) -> StagingRecord:
    """Build a staging record of the given domain from a plain mapping.

    Dates may be given as ``date`` objects or ISO strings (YAML loaders return
    either). Enum-valued fields accept their string values.

    Raises:
        ValueError: If the mapping has unknown keys, misses required keys,
            holds null in a field that is not ``Optional``, or holds values
            that cannot be coerced.

    Examples:
        >>> rec = record_from_dict(StagingDomain.ACCRUALS, {
        ...     "id": "a1", "org_unit_code": "ALM", "period_ym": "2024-12",
        ...     "user_id": "u1", "funding_source": "RB", "article_code": "1.2.1",
        ...     "accrual_amount": 2500000, "accrual_date": "2024-12-01",
        ... })
        >>> rec.accrual_date
        datetime.date(2024, 12, 1)
    """
    record_type = RECORD_TYPES[StagingDomain(domain)]
    field_types = {f.name: str(f.type) for f in fields(record_type)}
    unknown = sorted(set(data) - set(field_types))
    if unknown:
        raise ValueError(
            f"Unknown fields for {record_type.__name__}: {', '.join(unknown)}"
        )
    # annotations are strings here (postponed evaluation)
    nulls = sorted(
        k for k, v in data.items() if v is None and not field_types[k].startswith("Optional[")
    )
    if nulls:
        raise ValueError(
            f"Invalid {record_type.__name__} record {data.get('id')!r}: "
            f"null value for {', '.join(nulls)}"
        )
    try:
        kwargs = {k: _coerce(k, v) for k, v in data.items()}
        if "id" in kwargs:
            kwargs["id"] = str(kwargs["id"])
        return record_type(**kwargs)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid {record_type.__name__} record {data.get('id')!r}: {e}") from e


@dataclass
class StagingSnapshot:
    """All staging records of one branch and one period.

    Construction enforces that every record belongs to
    ``(org_unit_code, period_ym)`` and sits in the list of its own domain.

    Examples:
        >>> snap = StagingSnapshot("ALM", "2024-12")
        >>> snap.record_count()
        0
    """

    org_unit_code: str
    period_ym: str
    contingent: List[ContingentRecord] = field(default_factory=list)
    accruals: List[IncomeAccrualRecord] = field(default_factory=list)
    cash_schedule: List[CashScheduleRecord] = field(default_factory=list)
    staffing: List[StaffingRecord] = field(default_factory=list)
    trips: List[TripRecord] = field(default_factory=list)
    calculations: List[UtilityCalculationRecord] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate scope and domain placement of every record."""
        for domain in StagingDomain:
            expected_type = RECORD_TYPES[domain]
            for record in self.records(domain):
                if not isinstance(record, expected_type):
                    raise ValueError(
                        f"{type(record).__name__} {record.id!r} placed in '{domain.value}'"
                    )
                if (record.org_unit_code, record.period_ym) != (
                    self.org_unit_code,
                    self.period_ym,
                ):
                    raise ValueError(
                        f"Record {record.id!r} is scoped to "
                        f"{record.org_unit_code}/{record.period_ym}, "
                        f"snapshot is {self.org_unit_code}/{self.period_ym}"
                    )

    @classmethod
    def from_records(
        cls, org_unit_code: str, period_ym: str, records: Iterable[StagingRecord]
    ) -> "StagingSnapshot":
        """Group records into a snapshot by their domain tag."""
        grouped: Dict[StagingDomain, List[StagingRecord]] = {d: [] for d in StagingDomain}
        for record in records:
            grouped[record.domain].append(record)
        return cls(
            org_unit_code,
            period_ym,
            **{domain.value: items for domain, items in grouped.items()},
        )

    def records(self, domain: StagingDomain) -> List[StagingRecord]:
        return getattr(self, StagingDomain(domain).value)

    def all_records(self) -> List[StagingRecord]:
        out: List[StagingRecord] = []
        for domain in StagingDomain:
            out.extend(self.records(domain))
        return out

    def record_count(self) -> int:
        return sum(len(self.records(d)) for d in StagingDomain)

    def approved(self) -> "StagingSnapshot":
        """Return a new snapshot holding only approved records."""
        return replace(
            self,
            **{
                domain.value: [r for r in self.records(domain) if r.is_approved]
                for domain in StagingDomain
            },
        )


__all__ = [
    "StagingRecord",
    "ContingentRecord",
    "IncomeAccrualRecord",
    "CashScheduleRecord",
    "StaffingRecord",
    "TripRecord",
    "UtilityCalculationRecord",
    "RECORD_TYPES",
    "record_from_dict",
    "StagingSnapshot",
]
