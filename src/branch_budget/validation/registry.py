"""Validation check registry and runner.

This module orchestrates validation of a branch/period snapshot:
- ALL_CHECKS: List of per-domain record check instances
- run_validation(): Runs record checks, cross-module checks and alerts
- print_report(): Displays validation results to console
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Set

from branch_budget.core.enums import AlertType
from branch_budget.core.schemas import StagingSnapshot
from .alerts import check_critical_alerts
from .checks.contingent import ContingentCheck
from .checks.opex import TripCheck, UtilityCalculationCheck
from .checks.record_fields import RecordFieldsCheck
from .checks.revenue import AccrualCheck, CashScheduleCheck
from .checks.staffing import StaffingCheck
from .config import BUDGET_MODULE, CROSS_CHECK_MODULE, SYSTEM_MODULE, get_severity
from .cross_module import (
    validate_budget_balance,
    validate_revenue_vs_contingent,
    validate_staffing_vs_contingent,
)
from .models import (
    CheckResult,
    ErrorKind,
    ValidationError,
    ValidationInfo,
    ValidationResult,
    ValidationSummary,
    ValidationWarning,
)

logger = logging.getLogger(__name__)


# Registry of per-domain record checks
# Order matches the staging tables a branch fills in
ALL_CHECKS = [
    ContingentCheck(),
    AccrualCheck(),
    CashScheduleCheck(),
    StaffingCheck(),
    TripCheck(),
    UtilityCalculationCheck(),
]


def _report_cross_module(
    check_id: str,
    module: str,
    field: str,
    message: str,
    errors: List[ValidationError],
    warnings: List[ValidationWarning],
    infos: List[ValidationInfo],
) -> int:
    """File a cross-module message under its configured severity.

    Returns:
        1 if the message was recorded as an error, else 0.
    """
    severity = get_severity(check_id)
    if severity == "error":
        errors.append(
            ValidationError(
                module=module,
                field=field,
                message=message,
                severity=severity,
                kind=ErrorKind.CROSS_MODULE,
            )
        )
        return 1
    if severity == "warning":
        warnings.append(ValidationWarning(module, message))
    else:
        infos.append(ValidationInfo(module, message))
    return 0


def run_validation(
    snapshot: StagingSnapshot,
    today: Optional[date] = None,
    include_field_checks: bool = False,
) -> ValidationResult:
    """Run all validation stages on a snapshot.

    Stages run in a fixed order: record checks per domain, the cross-module
    checks, then the critical alerts. Nothing is read or written.

    Args:
        snapshot: Staging records of one branch and period, any status.
        today: Reference date for overdue alerts. Defaults to ``date.today()``.
        include_field_checks: Also run required-field and format checks on
            every record.

    Returns:
        ValidationResult with ``is_valid`` True when no errors were found.

    Example::

        result = run_validation(snapshot, today=date(2024, 12, 20))
        print(result.summary_text())
    """
    logger.info(
        "Validating %s/%s (%d records)",
        snapshot.org_unit_code,
        snapshot.period_ym,
        snapshot.record_count(),
    )
    errors: List[ValidationError] = []
    warnings: List[ValidationWarning] = []
    infos: List[ValidationInfo] = []
    invalid_ids: Set[str] = set()
    total_records = 0
    error_count = 0

    checks = list(ALL_CHECKS)
    if include_field_checks:
        checks.append(RecordFieldsCheck())

    for check in checks:
        result: CheckResult = check.validate(snapshot)
        if check.domain is not None:
            total_records += result.records_checked
        error_count += result.fail_count
        errors.extend(result.errors)
        invalid_ids.update(result.invalid_record_ids)
        logger.debug(
            "Check %s: %d records, %d failures",
            result.check_id,
            result.records_checked,
            result.fail_count,
        )

    # Cross-module checks
    revenue = validate_revenue_vs_contingent(snapshot.contingent, snapshot.accruals)
    if revenue.warning:
        error_count += _report_cross_module(
            "revenue_vs_contingent", CROSS_CHECK_MODULE, "Revenue", revenue.warning,
            errors, warnings, infos,
        )

    staffing = validate_staffing_vs_contingent(snapshot.contingent, snapshot.staffing)
    if staffing.warning:
        error_count += _report_cross_module(
            "staffing_vs_contingent", CROSS_CHECK_MODULE, "Staffing", staffing.warning,
            errors, warnings, infos,
        )

    budget = validate_budget_balance(
        snapshot.accruals, snapshot.staffing, snapshot.trips, snapshot.calculations
    )
    if budget.error:
        check_id, message = "budget_deficit", budget.error
    elif budget.warning:
        check_id, message = "low_profit_margin", budget.warning
    else:
        check_id, message = "budget_balanced", budget.message
    if message:
        error_count += _report_cross_module(
            check_id, BUDGET_MODULE, "Balance", message, errors, warnings, infos
        )

    # Critical alerts
    for alert in check_critical_alerts(snapshot, today=today):
        if alert.type == AlertType.ERROR:
            errors.append(
                ValidationError(
                    module=SYSTEM_MODULE,
                    field="Alert",
                    message=alert.message,
                    kind=ErrorKind.ALERT,
                )
            )
            error_count += 1
        elif alert.type == AlertType.WARNING:
            warnings.append(ValidationWarning(SYSTEM_MODULE, alert.message))
        else:
            infos.append(ValidationInfo(SYSTEM_MODULE, alert.message))

    summary = ValidationSummary(
        total_records=total_records,
        valid_records=total_records - len(invalid_ids),
        error_count=error_count,
        warning_count=len(warnings),
        info_count=len(infos),
    )
    logger.info(
        "Validation of %s/%s finished: %d errors, %d warnings",
        snapshot.org_unit_code,
        snapshot.period_ym,
        error_count,
        len(warnings),
    )
    return ValidationResult(
        is_valid=error_count == 0,
        errors=errors,
        warnings=warnings,
        infos=infos,
        summary=summary,
        org_unit_code=snapshot.org_unit_code,
        period_ym=snapshot.period_ym,
    )


def print_report(result: ValidationResult) -> None:
    """Print validation results to console.

    Displays a summary followed by every error, warning and info.

    Example output::

        Validation Summary:
          Scope: ALM / 2024-12
          Records: 6 checked (5 valid)
          Issues: 1 errors, 0 warnings, 1 infos

        ❌ Staffing | Employee E-7: Base salary (80,000 ₸) is below the minimum wage (85,000 ₸)
    """
    print(result.to_console_summary())


__all__ = ["ALL_CHECKS", "run_validation", "print_report"]
