"""Core utility functions for Branch Budget Tools.

This module provides shared helpers used across the project: period keys,
day spans, deterministic ledger identifiers and status transitions.
"""

from __future__ import annotations

import math
import re
from dataclasses import replace
from datetime import date, datetime
from typing import Dict, Tuple, TypeVar, Union

from .enums import RecordStatus

_PERIOD_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")

# Ledger id prefixes per source table
LEDGER_ID_PREFIXES: Dict[str, str] = {
    "stg_contingent": "cont",
    "stg_income_accruals": "accr",
    "stg_cash_schedule": "cash",
}

ALLOWED_TRANSITIONS: Dict[RecordStatus, Tuple[RecordStatus, ...]] = {
    RecordStatus.DRAFT: (RecordStatus.SUBMITTED,),
    RecordStatus.SUBMITTED: (RecordStatus.DRAFT, RecordStatus.APPROVED),
    RecordStatus.APPROVED: (),
}

DateLike = Union[date, datetime]
R = TypeVar("R")


def validate_period_ym(period_ym: str) -> bool:
    """Return True if ``period_ym`` is a "YYYY-MM" key.

    Examples:
        >>> validate_period_ym("2024-12")
        True
        >>> validate_period_ym("2024-13")
        False
    """
    return bool(_PERIOD_RE.match(str(period_ym)))


def year_month(value: DateLike) -> str:
    """Return the "YYYY-MM" key of a date."""
    return f"{value.year:04d}-{value.month:02d}"


def span_days(start: DateLike, end: DateLike) -> int:
    """Whole days between two dates, rounded up.

    Dates count as midnight, so a trip from the 1st to the 5th spans 4 days.
    """
    if isinstance(start, datetime) or isinstance(end, datetime):
        start_dt = start if isinstance(start, datetime) else datetime(start.year, start.month, start.day)
        end_dt = end if isinstance(end, datetime) else datetime(end.year, end.month, end.day)
        return math.ceil((end_dt - start_dt).total_seconds() / 86400)
    return (end - start).days


def ledger_line_id(source_table: str, source_record_id: str) -> str:
    """Deterministic ledger line id for a source record.

    Raises:
        ValueError: If ``source_table`` has no registered prefix.

    Examples:
        >>> ledger_line_id("stg_income_accruals", "42")
        'accr_42'
    """
    try:
        prefix = LEDGER_ID_PREFIXES[source_table]
    except KeyError:
        raise ValueError(f"Unknown source table: {source_table}") from None
    return f"{prefix}_{source_record_id}"


def can_change_status(current: RecordStatus, target: RecordStatus) -> bool:
    """Return True if a branch role may move a record from ``current`` to ``target``."""
    return RecordStatus(target) in ALLOWED_TRANSITIONS.get(RecordStatus(current), ())


def transition(record: R, target: RecordStatus, now: datetime | None = None) -> R:
    """Return a copy of ``record`` moved to ``target`` with a fresh ``updated_at``.

    Raises:
        ValueError: If the transition is not allowed.
    """
    current = getattr(record, "status")
    if not can_change_status(current, target):
        raise ValueError(
            f"Illegal status transition for {getattr(record, 'id', '?')!r}: "
            f"{RecordStatus(current).value} -> {RecordStatus(target).value}"
        )
    return replace(record, status=RecordStatus(target), updated_at=now or datetime.now())


__all__ = [
    "LEDGER_ID_PREFIXES",
    "ALLOWED_TRANSITIONS",
    "validate_period_ym",
    "year_month",
    "span_days",
    "ledger_line_id",
    "can_change_status",
    "transition",
]
