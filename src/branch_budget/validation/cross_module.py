"""Cross-module validation.

Compares aggregates across staging domains to surface systemic anomalies
(revenue out of line with the contingent, staffing levels, budget balance).
These are plausibility checks: apart from a budget deficit they only warn.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from branch_budget.core.enums import EmploymentStatus
from branch_budget.core.schemas import (
    ContingentRecord,
    IncomeAccrualRecord,
    StaffingRecord,
    TripRecord,
    UtilityCalculationRecord,
)
from . import config


@dataclass(frozen=True)
class CrossModuleResult:
    """Outcome of a cross-module check.

    Attributes:
        is_valid: False when a warning or error was raised.
        warning: Non-fatal anomaly message.
        error: Blocking inconsistency message.
        message: Informational message on success.
        balance: Revenue minus expenses (budget balance only).
        profit_margin: Balance as a percentage of revenue (budget balance only).
    """

    is_valid: bool
    warning: Optional[str] = None
    error: Optional[str] = None
    message: Optional[str] = None
    balance: Optional[float] = None
    profit_margin: Optional[float] = None


def validate_revenue_vs_contingent(
    contingent: Iterable[ContingentRecord], accruals: Iterable[IncomeAccrualRecord]
) -> CrossModuleResult:
    """Warn when accrued revenue deviates more than 50% from students × norm.

    The per-student norm (``EXPECTED_REVENUE_PER_STUDENT``) is an approximation.
    """
    total_students = sum(item.student_count for item in contingent)
    total_revenue = sum(item.accrual_amount or 0 for item in accruals)
    expected = total_students * config.EXPECTED_REVENUE_PER_STUDENT

    if expected == 0:
        if total_revenue > 0:
            return CrossModuleResult(
                is_valid=False,
                warning=f"Revenue of {total_revenue:,.0f} ₸ accrued with no students in the contingent",
            )
        return CrossModuleResult(is_valid=True)

    deviation = abs(total_revenue - expected) / expected
    if deviation > config.MAX_REVENUE_DEVIATION:
        return CrossModuleResult(
            is_valid=False,
            warning=(
                f"Revenue deviates significantly from the expected amount. "
                f"Expected: {expected:,.0f} ₸, actual: {total_revenue:,.0f} ₸"
            ),
        )
    return CrossModuleResult(is_valid=True)


def validate_staffing_vs_contingent(
    contingent: Iterable[ContingentRecord], staffing: Iterable[StaffingRecord]
) -> CrossModuleResult:
    """Warn when the student-to-active-staff ratio is outside 8..25."""
    total_students = sum(item.student_count for item in contingent)
    active_staff = sum(1 for item in staffing if item.employment_status == EmploymentStatus.ACTIVE)
    ideal = config.IDEAL_STUDENTS_PER_STAFF

    if active_staff == 0:
        if total_students == 0:
            return CrossModuleResult(is_valid=True)
        return CrossModuleResult(
            is_valid=False,
            warning=(
                f"Understaffed: {total_students} students and no active staff "
                f"(recommended {ideal}:1)"
            ),
        )

    ratio = total_students / active_staff
    if ratio < config.MIN_STUDENTS_PER_STAFF:
        return CrossModuleResult(
            is_valid=False,
            warning=f"Overstaffed: student-to-staff ratio {ratio:.1f}:1 (recommended {ideal}:1)",
        )
    if ratio > config.MAX_STUDENTS_PER_STAFF:
        return CrossModuleResult(
            is_valid=False,
            warning=f"Understaffed: student-to-staff ratio {ratio:.1f}:1 (recommended {ideal}:1)",
        )
    return CrossModuleResult(is_valid=True)


def validate_budget_balance(
    accruals: Iterable[IncomeAccrualRecord],
    staffing: Iterable[StaffingRecord],
    trips: Iterable[TripRecord],
    calculations: Iterable[UtilityCalculationRecord],
) -> CrossModuleResult:
    """Compare revenue against salaries plus operating expenses.

    A deficit is an error; a margin below 5% is a warning. With no revenue the
    margin is taken as 0%.
    """
    total_revenue = sum(item.accrual_amount or 0 for item in accruals)
    total_salaries = sum(item.total_salary or 0 for item in staffing)
    total_opex = sum(t.total_amount or 0 for t in trips) + sum(
        c.calculated_amount or 0 for c in calculations
    )
    total_expenses = total_salaries + total_opex
    balance = total_revenue - total_expenses

    if balance < 0:
        return CrossModuleResult(
            is_valid=False,
            error=(
                f"Expenses ({total_expenses:,.0f} ₸) exceed revenue ({total_revenue:,.0f} ₸) "
                f"by {abs(balance):,.0f} ₸"
            ),
            balance=balance,
        )

    profit_margin = (balance / total_revenue) * 100 if total_revenue else 0.0
    if profit_margin < config.MIN_PROFIT_MARGIN_PERCENT:
        return CrossModuleResult(
            is_valid=False,
            warning=(
                f"Low profit margin: {profit_margin:.1f}% "
                f"(recommended at least {config.MIN_PROFIT_MARGIN_PERCENT:.0f}%)"
            ),
            balance=balance,
            profit_margin=profit_margin,
        )

    return CrossModuleResult(
        is_valid=True,
        message=f"Budget is balanced. Surplus: {balance:,.0f} ₸ ({profit_margin:.1f}%)",
        balance=balance,
        profit_margin=profit_margin,
    )


__all__ = [
    "CrossModuleResult",
    "validate_revenue_vs_contingent",
    "validate_staffing_vs_contingent",
    "validate_budget_balance",
]
