"""Statistics over staging records."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from branch_budget.core.enums import RecordStatus, StagingDomain
from branch_budget.core.schemas import StagingRecord
from branch_budget.validation.fields import validate_record

logger = logging.getLogger(__name__)

_COUNTED_DOMAINS = (
    StagingDomain.CONTINGENT,
    StagingDomain.ACCRUALS,
    StagingDomain.CASH_SCHEDULE,
)


@dataclass
class EtlStatistics:
    """Staging-layer statistics.

    Attributes:
        stg_records: Record counts for contingent, accruals and cash schedule.
        processed_periods: Sorted unique periods present in the contingent.
        last_processed_date: Latest ``updated_at`` among contingent records.
        validation_errors: Field-level problems found in the counted records.
    """

    stg_records: Dict[str, int] = field(
        default_factory=lambda: {d.value: 0 for d in _COUNTED_DOMAINS}
    )
    processed_periods: List[str] = field(default_factory=list)
    last_processed_date: Optional[datetime] = None
    validation_errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stg_records": dict(self.stg_records),
            "processed_periods": list(self.processed_periods),
            "last_processed_date": (
                self.last_processed_date.isoformat() if self.last_processed_date else None
            ),
            "validation_errors": list(self.validation_errors),
        }


def get_etl_statistics(
    records: Iterable[StagingRecord], org_unit_code: Optional[str] = None
) -> EtlStatistics:
    """Summarize staging records, optionally for one branch only."""
    selected = [
        r for r in records if org_unit_code is None or r.org_unit_code == org_unit_code
    ]
    stats = EtlStatistics()
    if not selected:
        return stats

    df = pd.DataFrame(
        {
            "domain": [r.domain.value for r in selected],
            "period_ym": [r.period_ym for r in selected],
            "updated_at": [r.updated_at for r in selected],
        }
    )
    counts = df["domain"].value_counts()
    stats.stg_records = {d.value: int(counts.get(d.value, 0)) for d in _COUNTED_DOMAINS}

    contingent = df[df["domain"] == StagingDomain.CONTINGENT.value]
    stats.processed_periods = sorted(contingent["period_ym"].unique().tolist())
    updated = pd.to_datetime(contingent["updated_at"]).dropna()
    if not updated.empty:
        stats.last_processed_date = updated.max().to_pydatetime()

    for record in selected:
        if record.domain not in _COUNTED_DOMAINS:
            continue
        outcome = validate_record(record)
        if not outcome.is_valid:
            stats.validation_errors.append(f"{record.domain.value}:{record.id}: {outcome.error}")

    logger.debug(
        "Statistics for %s: %s", org_unit_code or "all branches", stats.stg_records
    )
    return stats


def count_by_status(records: Iterable[StagingRecord]) -> Dict[str, int]:
    """Number of records per lifecycle status (every status present, possibly 0).

    Example::

        count_by_status([draft_record, approved_record])
        # {"draft": 1, "submitted": 0, "approved": 1}
    """
    counts = {status.value: 0 for status in RecordStatus}
    for record in records:
        counts[RecordStatus(record.status).value] += 1
    return counts


__all__ = ["EtlStatistics", "get_etl_statistics", "count_by_status"]
