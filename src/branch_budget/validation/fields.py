"""Per-record field validation.

Explicit predicates for required fields, formats and simple ranges of a single
staging record. Each variant has its own list of field checks; ``validate_record``
dispatches on the record's domain tag.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from branch_budget.core.enums import FundingSource, RecordStatus, StagingDomain
from branch_budget.core.schemas import (
    CashScheduleRecord,
    ContingentRecord,
    IncomeAccrualRecord,
    StaffingRecord,
    StagingRecord,
    TripRecord,
    UtilityCalculationRecord,
)
from branch_budget.core.utils import validate_period_ym

FieldIssue = Tuple[str, str]  # (field, message)

_FUNDING_CODES = {f.value for f in FundingSource}


@dataclass(frozen=True)
class RecordValidation:
    """Field-level validation outcome for one record."""

    is_valid: bool
    issues: List[FieldIssue] = field(default_factory=list)

    @property
    def error(self) -> Optional[str]:
        if not self.issues:
            return None
        return "; ".join(f"{f}: {m}" for f, m in self.issues)


def _check_base(record: StagingRecord) -> List[FieldIssue]:
    issues: List[FieldIssue] = []
    if not record.id:
        issues.append(("id", "Record id is required"))
    if not (2 <= len(record.org_unit_code or "") <= 10):
        issues.append(("org_unit_code", "Branch code must be 2-10 characters"))
    if not validate_period_ym(record.period_ym):
        issues.append(("period_ym", "Period must be in YYYY-MM format"))
    if not record.user_id:
        issues.append(("user_id", "User id is required"))
    try:
        RecordStatus(record.status)
    except ValueError:
        issues.append(("status", f"Unknown status: {record.status}"))
    return issues


def _check_funding(value: Optional[str], required: bool = True) -> List[FieldIssue]:
    if value is None and not required:
        return []
    if value not in _FUNDING_CODES:
        return [("funding_source", f"Funding source must be one of {sorted(_FUNDING_CODES)}")]
    return []


def _check_contingent(record: ContingentRecord) -> List[FieldIssue]:
    issues = _check_funding(record.funding_source)
    if not record.program_name:
        issues.append(("program_name", "Program name is required"))
    if record.student_count <= 0:
        issues.append(("student_count", "Student count must be greater than 0"))
    if record.funding_source == FundingSource.PU:
        if record.tariff_amount is None or record.tariff_amount <= 0:
            issues.append(
                ("tariff_amount", "Tariff is required and must be positive for fee-paying (PU) classes")
            )
    elif record.tariff_amount is not None and record.tariff_amount <= 0:
        issues.append(("tariff_amount", "Tariff must be positive"))
    return issues


def _check_accrual(record: IncomeAccrualRecord) -> List[FieldIssue]:
    issues = _check_funding(record.funding_source)
    if not record.article_code:
        issues.append(("article_code", "Article code is required"))
    if record.accrual_amount <= 0:
        issues.append(("accrual_amount", "Accrual amount must be positive"))
    return issues


def _check_cash_schedule(record: CashScheduleRecord) -> List[FieldIssue]:
    issues = _check_funding(record.funding_source)
    if not record.article_code:
        issues.append(("article_code", "Article code is required"))
    if record.amount <= 0:
        issues.append(("amount", "Amount must be positive"))
    if not record.payment_method:
        issues.append(("payment_method", "Payment method is required"))
    if record.doc_date > record.payment_date:
        issues.append(("doc_date", "Document date cannot be later than the payment date"))
    return issues


def _check_staffing(record: StaffingRecord) -> List[FieldIssue]:
    issues = _check_funding(record.funding_source, required=False)
    if not record.employee_id:
        issues.append(("employee_id", "Employee id is required"))
    if not record.full_name:
        issues.append(("full_name", "Employee name is required"))
    for name in ("base_salary", "bonus", "allowances", "total_salary"):
        if getattr(record, name) < 0:
            issues.append((name, "Value cannot be negative"))
    return issues


def _check_trip(record: TripRecord) -> List[FieldIssue]:
    issues = _check_funding(record.funding_source, required=False)
    if not record.employee_name:
        issues.append(("employee_name", "Employee name is required"))
    if not record.destination:
        issues.append(("destination", "Destination is required"))
    if record.end_date < record.start_date:
        issues.append(("end_date", "End date cannot be earlier than the start date"))
    if record.total_amount < 0:
        issues.append(("total_amount", "Value cannot be negative"))
    return issues


def _check_calculation(record: UtilityCalculationRecord) -> List[FieldIssue]:
    issues = _check_funding(record.funding_source, required=False)
    if not record.service_name:
        issues.append(("service_name", "Service name is required"))
    if record.calculated_amount <= 0:
        issues.append(("calculated_amount", "Calculated amount must be positive"))
    return issues


_DOMAIN_CHECKS: Dict[StagingDomain, Callable[..., List[FieldIssue]]] = {
    StagingDomain.CONTINGENT: _check_contingent,
    StagingDomain.ACCRUALS: _check_accrual,
    StagingDomain.CASH_SCHEDULE: _check_cash_schedule,
    StagingDomain.STAFFING: _check_staffing,
    StagingDomain.TRIPS: _check_trip,
    StagingDomain.CALCULATIONS: _check_calculation,
}


def validate_record(record: StagingRecord) -> RecordValidation:
    """Validate required fields, formats and simple ranges of one record.

    Examples:
        >>> rec = ContingentRecord(
        ...     id="c1", org_unit_code="ALM", period_ym="2024-12", user_id="u1",
        ...     program_name="General", grade_level="5", student_count=28,
        ...     funding_source="PU",
        ... )
        >>> validate_record(rec).is_valid
        False
    """
    issues = _check_base(record) + _DOMAIN_CHECKS[record.domain](record)
    return RecordValidation(is_valid=not issues, issues=issues)


__all__ = ["FieldIssue", "RecordValidation", "validate_record"]
