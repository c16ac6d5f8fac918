"""Business rule library.

Stateless predicates that validate one staging record against static
thresholds (see ``config``) and against a caller-supplied set of sibling
records. Callers exclude the record under test from ``siblings`` before
calling, so every sibling match is a genuine duplicate or overlap.

No rule raises on a violation; each returns a ``RuleResult``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Sequence

from branch_budget.core.enums import FundingSource
from branch_budget.core.schemas import (
    CashScheduleRecord,
    ContingentRecord,
    IncomeAccrualRecord,
    StaffingRecord,
    TripRecord,
    UtilityCalculationRecord,
)
from branch_budget.core.utils import DateLike, span_days, year_month
from . import config
from .models import ErrorKind, RuleResult


def _money(amount: float) -> str:
    return f"{amount:,.0f} ₸"


# ============================================================================
# CONTINGENT
# ============================================================================

def validate_student_count(student_count: int, grade_level: str) -> RuleResult:
    """Check that a class is neither overfilled nor too small to open.

    Pre-school groups (grade "0") have no minimum.

    Examples:
        >>> validate_student_count(30, "5").is_valid
        True
        >>> validate_student_count(14, "0").is_valid
        True
    """
    if student_count > config.MAX_STUDENTS_PER_CLASS:
        return RuleResult.fail(
            f"Student count ({student_count}) exceeds the maximum allowed "
            f"({config.MAX_STUDENTS_PER_CLASS})"
        )
    if student_count < config.MIN_STUDENTS_PER_CLASS and str(grade_level) != config.PRESCHOOL_GRADE:
        return RuleResult.fail(
            f"Student count ({student_count}) is below the minimum required "
            f"({config.MIN_STUDENTS_PER_CLASS}) to open a class"
        )
    return RuleResult.ok()


def validate_unique_class(
    grade_level: str,
    education_profile: str,
    language: str,
    org_unit_code: str,
    period_ym: str,
    siblings: Iterable[ContingentRecord],
) -> RuleResult:
    """Fail if a sibling describes the same class (grade, profile, language, scope)."""
    for item in siblings:
        if (
            item.grade_level == grade_level
            and item.education_profile == education_profile
            and item.language == language
            and item.org_unit_code == org_unit_code
            and item.period_ym == period_ym
        ):
            lang = "Kazakh" if language == "KAZ" else "Russian"
            return RuleResult.fail(
                f'Class {grade_level} with profile "{education_profile}" taught in {lang} '
                f"already exists",
                ErrorKind.UNIQUENESS,
            )
    return RuleResult.ok()


def validate_contingent_uniqueness(records: Sequence[ContingentRecord]) -> List[str]:
    """Report duplicate (org, period, program, grade) keys in a contingent table."""
    seen = set()
    for item in records:
        key = (item.org_unit_code, item.period_ym, item.program_name, item.grade_level)
        if key in seen:
            return ["Duplicate contingent records for the same program and grade"]
        seen.add(key)
    return []


def calculate_revenue_from_contingent(record: ContingentRecord) -> float:
    """Tuition revenue implied by a contingent record.

    Only fee-paying (PU) classes with a tariff produce revenue here; budget
    and subsidy revenue comes from accrual plans.

    Examples:
        >>> rec = ContingentRecord(
        ...     id="c1", org_unit_code="ALM", period_ym="2024-12", user_id="u1",
        ...     program_name="General", grade_level="5", student_count=28,
        ...     funding_source="PU", tariff_amount=65000,
        ... )
        >>> calculate_revenue_from_contingent(rec)
        1820000
    """
    if record.funding_source == FundingSource.PU and record.tariff_amount:
        return record.student_count * record.tariff_amount
    return 0


# ============================================================================
# REVENUE
# ============================================================================

def validate_accrual(
    amount: float,
    funding_source: str,
    accrual_date: DateLike,
    org_unit_code: str,
    siblings: Iterable[IncomeAccrualRecord],
) -> RuleResult:
    """Check accrual amount bounds and same-day duplicates."""
    if amount > config.MAX_ACCRUAL_AMOUNT:
        return RuleResult.fail(
            f"Accrual amount ({_money(amount)}) exceeds the maximum allowed "
            f"({_money(config.MAX_ACCRUAL_AMOUNT)})"
        )
    if amount < config.MIN_ACCRUAL_AMOUNT:
        return RuleResult.fail(
            f"Accrual amount ({_money(amount)}) is below the minimum allowed "
            f"({_money(config.MIN_ACCRUAL_AMOUNT)})"
        )
    for item in siblings:
        if (
            item.funding_source == funding_source
            and item.accrual_date == accrual_date
            and item.org_unit_code == org_unit_code
            and abs(item.accrual_amount - amount) < config.DUPLICATE_AMOUNT_EPSILON
        ):
            return RuleResult.fail(
                f"A matching accrual already exists on {accrual_date.isoformat()}",
                ErrorKind.UNIQUENESS,
            )
    return RuleResult.ok()


def validate_cash_schedule(
    amount: float,
    expected_date: DateLike,
    funding_source: str,
    org_unit_code: str,
    siblings: Iterable[CashScheduleRecord],
) -> RuleResult:
    """Check a planned receipt's amount and one-entry-per-day uniqueness."""
    if amount > config.MAX_ACCRUAL_AMOUNT:
        return RuleResult.fail(
            f"Planned amount ({_money(amount)}) exceeds the maximum allowed "
            f"({_money(config.MAX_ACCRUAL_AMOUNT)})"
        )
    for item in siblings:
        if (
            item.funding_source == funding_source
            and item.expected_date == expected_date
            and item.org_unit_code == org_unit_code
        ):
            return RuleResult.fail(
                f"A cash schedule entry for {expected_date.isoformat()} already exists",
                ErrorKind.UNIQUENESS,
            )
    return RuleResult.ok()


@dataclass(frozen=True)
class RevenueCashFlowCheck:
    is_valid: bool
    variance: float
    errors: List[str]


def validate_revenue_vs_cash_flow(
    accruals: Iterable[IncomeAccrualRecord],
    cash_schedule: Iterable[CashScheduleRecord],
    tolerance: float = config.REVENUE_CASH_FLOW_TOLERANCE,
) -> RevenueCashFlowCheck:
    """Reconcile accrued revenue against scheduled cash receipts.

    The variance is relative to total revenue; with no revenue it is
    considered 0 %.
    """
    total_revenue = sum(r.accrual_amount for r in accruals)
    total_cash = sum(c.amount for c in cash_schedule)
    variance = abs(total_revenue - total_cash)
    variance_ratio = variance / total_revenue if total_revenue > 0 else 0.0

    errors: List[str] = []
    if variance_ratio > tolerance:
        errors.append(
            f"Significant mismatch between accrued revenue ({total_revenue:,.0f}) "
            f"and cash receipts ({total_cash:,.0f}): {variance:,.0f}"
        )
    return RevenueCashFlowCheck(is_valid=variance_ratio <= tolerance, variance=variance, errors=errors)


# ============================================================================
# STAFFING
# ============================================================================

def validate_employee(
    employee_id: str,
    full_name: str,
    position: str,
    base_salary: float,
    bonus: float,
    org_unit_code: str,
    period_ym: str,
    siblings: Iterable[StaffingRecord],
) -> RuleResult:
    """Check employee uniqueness in the period and salary/bonus bounds."""
    for item in siblings:
        if (
            item.employee_id == employee_id
            and item.org_unit_code == org_unit_code
            and item.period_ym == period_ym
        ):
            return RuleResult.fail(
                f'Employee with ID "{employee_id}" already exists in the current period',
                ErrorKind.UNIQUENESS,
            )
    if base_salary > config.MAX_SALARY:
        return RuleResult.fail(
            f"Base salary ({_money(base_salary)}) exceeds the maximum allowed "
            f"({_money(config.MAX_SALARY)})"
        )
    if base_salary < config.MIN_SALARY:
        return RuleResult.fail(
            f"Base salary ({_money(base_salary)}) is below the minimum wage "
            f"({_money(config.MIN_SALARY)})"
        )
    if bonus > base_salary * (config.MAX_BONUS_PERCENT / 100):
        return RuleResult.fail(
            f"Bonus ({_money(bonus)}) exceeds {config.MAX_BONUS_PERCENT}% of the base salary"
        )
    return RuleResult.ok()


@dataclass(frozen=True)
class TaxBreakdown:
    gross_salary: float
    social_tax: int
    pension_contribution: int
    total_deductions: int
    net_salary: float


def calculate_taxes(base_salary: float, bonus: float, allowances: float) -> TaxBreakdown:
    """Payroll deductions for one employee.

    Examples:
        >>> calculate_taxes(100_000, 0, 0).net_salary
        80500
    """
    gross = base_salary + bonus + allowances
    social_tax = round(gross * config.SOCIAL_TAX_RATE)
    pension = round(gross * config.PENSION_RATE)
    return TaxBreakdown(
        gross_salary=gross,
        social_tax=social_tax,
        pension_contribution=pension,
        total_deductions=social_tax + pension,
        net_salary=gross - social_tax - pension,
    )


# ============================================================================
# OPEX
# ============================================================================

def validate_trip(
    employee_name: str,
    destination: str,
    start_date: DateLike,
    end_date: DateLike,
    total_amount: float,
    siblings: Iterable[TripRecord],
) -> RuleResult:
    """Check trip duration, amount and overlap with the employee's other trips.

    Intervals are inclusive: a trip ending on the day another starts overlaps.
    """
    days = span_days(start_date, end_date)
    if days < config.MIN_TRIP_DAYS:
        return RuleResult.fail(
            f"Trip duration ({days} days) is below the minimum ({config.MIN_TRIP_DAYS} days)"
        )
    if days > config.MAX_TRIP_DAYS:
        return RuleResult.fail(
            f"Trip duration ({days} days) exceeds the maximum ({config.MAX_TRIP_DAYS} days)"
        )
    if total_amount > config.MAX_TRIP_AMOUNT:
        return RuleResult.fail(
            f"Trip amount ({_money(total_amount)}) exceeds the maximum allowed "
            f"({_money(config.MAX_TRIP_AMOUNT)})"
        )
    for item in siblings:
        if (
            item.employee_name == employee_name
            and item.start_date <= end_date
            and item.end_date >= start_date
        ):
            return RuleResult.fail(
                f"Trip overlaps an existing trip of {employee_name} from "
                f"{item.start_date.isoformat()} to {item.end_date.isoformat()}",
                ErrorKind.UNIQUENESS,
            )
    return RuleResult.ok()


@dataclass(frozen=True)
class DailyAllowance:
    days: int
    daily_rate: int
    total_allowance: int


def calculate_daily_allowances(
    start_date: DateLike, end_date: DateLike, is_international: bool = False
) -> DailyAllowance:
    """Per-diem for a trip: whole days (rounded up) times the applicable rate."""
    days = span_days(start_date, end_date)
    rate = (
        config.DAILY_ALLOWANCE_INTERNATIONAL if is_international else config.DAILY_ALLOWANCE_DOMESTIC
    )
    return DailyAllowance(days=days, daily_rate=rate, total_allowance=days * rate)


def validate_utility_calculation(
    service_name: str,
    calculation_method: str,
    calculated_amount: float,
    calculation_date: date,
    siblings: Iterable[UtilityCalculationRecord],
) -> RuleResult:
    """Check the amount is plausible and the service is calculated once per month."""
    if calculated_amount < config.MIN_UTILITY_AMOUNT or calculated_amount > config.MAX_UTILITY_AMOUNT:
        return RuleResult.fail(
            f"Implausible utility calculation amount: {_money(calculated_amount)}"
        )
    month = year_month(calculation_date)
    for item in siblings:
        if item.service_name == service_name and year_month(item.calculation_date) == month:
            return RuleResult.fail(
                f'A calculation for "{service_name}" in {month} already exists',
                ErrorKind.UNIQUENESS,
            )
    return RuleResult.ok()


__all__ = [
    "validate_student_count",
    "validate_unique_class",
    "validate_contingent_uniqueness",
    "calculate_revenue_from_contingent",
    "validate_accrual",
    "validate_cash_schedule",
    "RevenueCashFlowCheck",
    "validate_revenue_vs_cash_flow",
    "validate_employee",
    "TaxBreakdown",
    "calculate_taxes",
    "validate_trip",
    "DailyAllowance",
    "calculate_daily_allowances",
    "validate_utility_calculation",
]
