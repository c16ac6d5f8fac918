"""Validation configuration constants.

This module centralizes all business-rule thresholds and severity rules.
Adjust these constants to tune validation behavior based on branch data.

Severity Levels:
    - "error": Rule violations that must be fixed before submission
    - "warning": Plausibility issues that warrant review but never block aggregation
    - "info": Informational messages (e.g. a balanced budget)

Amounts are in the branch's single accounting currency (KZT).
"""

from __future__ import annotations

from branch_budget.core.enums import StagingDomain

# ============================================================================
# CONTINGENT
# ============================================================================

MAX_STUDENTS_PER_CLASS = 30
MIN_STUDENTS_PER_CLASS = 15  # Not applied to grade "0" (pre-school)
PRESCHOOL_GRADE = "0"

# ============================================================================
# REVENUE
# ============================================================================

MAX_ACCRUAL_AMOUNT = 50_000_000
MIN_ACCRUAL_AMOUNT = 1_000
DUPLICATE_AMOUNT_EPSILON = 1.0  # Accruals closer than this are duplicates

# Accrual vs cash receipts relative tolerance (1%)
REVENUE_CASH_FLOW_TOLERANCE = 0.01

# ============================================================================
# STAFFING
# ============================================================================

MAX_SALARY = 2_000_000
MIN_SALARY = 85_000  # Statutory minimum wage
MAX_BONUS_PERCENT = 100
SOCIAL_TAX_RATE = 0.095
PENSION_RATE = 0.10

# ============================================================================
# OPEX
# ============================================================================

MAX_TRIP_AMOUNT = 500_000
MIN_TRIP_DAYS = 1
MAX_TRIP_DAYS = 30
DAILY_ALLOWANCE_DOMESTIC = 8_000
DAILY_ALLOWANCE_INTERNATIONAL = 25_000

MIN_UTILITY_AMOUNT = 10_000
MAX_UTILITY_AMOUNT = 5_000_000

# ============================================================================
# CROSS-MODULE
# ============================================================================

# Approximation: an annual per-student figure compared against a
# period-scoped actual. Kept numerically until the business owner confirms.
EXPECTED_REVENUE_PER_STUDENT = 500_000
MAX_REVENUE_DEVIATION = 0.5

IDEAL_STUDENTS_PER_STAFF = 15
MIN_STUDENTS_PER_STAFF = 8
MAX_STUDENTS_PER_STAFF = 25

MIN_PROFIT_MARGIN_PERCENT = 5.0


# ============================================================================
# SEVERITY RULES
# ============================================================================
# Format: {check_id: severity}

_SEVERITY_MAP = {
    # Record rules
    "contingent": "error",
    "accruals": "error",
    "cash_schedule": "error",
    "staffing": "error",
    "trips": "error",
    "calculations": "error",
    "record_fields": "error",
    # Cross-module
    "revenue_vs_contingent": "warning",
    "staffing_vs_contingent": "warning",
    "budget_deficit": "error",
    "low_profit_margin": "warning",
    "budget_balanced": "info",
}

# Module labels used in validation messages
_MODULE_LABELS = {
    StagingDomain.CONTINGENT: "Contingent",
    StagingDomain.ACCRUALS: "Revenue",
    StagingDomain.CASH_SCHEDULE: "Cash schedule",
    StagingDomain.STAFFING: "Staffing",
    StagingDomain.TRIPS: "OPEX",
    StagingDomain.CALCULATIONS: "OPEX",
}

CROSS_CHECK_MODULE = "Cross-check"
BUDGET_MODULE = "Budget"
SYSTEM_MODULE = "System"


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def get_severity(check_id: str) -> str:
    """Get severity level for a check.

    Args:
        check_id: Validation check identifier (e.g., "staffing").

    Returns:
        Severity level: "error", "warning" or "info".

    Raises:
        ValueError: If check_id is unknown.

    Examples:
        >>> get_severity("trips")
        'error'
        >>> get_severity("revenue_vs_contingent")
        'warning'
    """
    if check_id not in _SEVERITY_MAP:
        raise ValueError(f"Unknown check_id: {check_id}")
    return _SEVERITY_MAP[check_id]


def get_module_label(domain: StagingDomain) -> str:
    """Human-readable module name for a staging domain."""
    return _MODULE_LABELS[StagingDomain(domain)]
