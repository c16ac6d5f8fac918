"""Operational alerts over a materialized snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from branch_budget.core.enums import AlertType, EmploymentStatus, PaymentStatus
from branch_budget.core.schemas import StagingSnapshot
from . import config


@dataclass(frozen=True)
class Alert:
    type: AlertType
    message: str
    count: int = 0
    amount: float = 0.0


def check_critical_alerts(snapshot: StagingSnapshot, today: Optional[date] = None) -> List[Alert]:
    """Scan a snapshot for overdue receipts, paid inactive staff and small classes.

    Args:
        snapshot: Branch/period staging data, any status.
        today: Reference date for pending receipts. Defaults to ``date.today()``.

    Returns:
        Alerts in a fixed order: overdue receipts, inactive staff, underfilled classes.
    """
    today = today or date.today()
    alerts: List[Alert] = []

    overdue = [
        item
        for item in snapshot.cash_schedule
        if item.payment_status == PaymentStatus.OVERDUE
        or (item.payment_status == PaymentStatus.PENDING and item.expected_date < today)
    ]
    if overdue:
        total = sum(item.amount for item in overdue)
        alerts.append(
            Alert(
                type=AlertType.ERROR,
                message=f"Overdue payments: {len(overdue)} totalling {total:,.0f} ₸",
                count=len(overdue),
                amount=total,
            )
        )

    inactive_paid = [
        item
        for item in snapshot.staffing
        if item.employment_status != EmploymentStatus.ACTIVE and item.total_salary > 0
    ]
    if inactive_paid:
        alerts.append(
            Alert(
                type=AlertType.WARNING,
                message=f"Inactive employees with accrued salary: {len(inactive_paid)}",
                count=len(inactive_paid),
            )
        )

    underfilled = [
        item
        for item in snapshot.contingent
        if item.student_count < config.MIN_STUDENTS_PER_CLASS
        and item.grade_level != config.PRESCHOOL_GRADE
    ]
    if underfilled:
        alerts.append(
            Alert(
                type=AlertType.WARNING,
                message=f"Underfilled classes: {len(underfilled)}",
                count=len(underfilled),
            )
        )

    return alerts


__all__ = ["Alert", "check_critical_alerts"]
