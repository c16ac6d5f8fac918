"""Revenue ledger (BDR) mapper."""

from __future__ import annotations

import logging
from typing import List

from branch_budget.core.enums import FundingSource, RevenueType
from branch_budget.core.schemas import StagingSnapshot
from branch_budget.core.utils import ledger_line_id
from .models import BudgetLine, get_revenue_type, plain

logger = logging.getLogger(__name__)

TUITION_ARTICLE_CODE = "1.1.1"
DIRECT_ACCRUAL_BASE = "Direct accrual"


def aggregate_revenues_to_bdr(
    snapshot: StagingSnapshot, org_unit_code: str, period_ym: str
) -> List[BudgetLine]:
    """Map approved contingent and accrual records to revenue lines.

    Fee-paying (PU) classes with a tariff produce one tuition line each; every
    approved accrual produces one line. Records that are not approved or not in
    ``(org_unit_code, period_ym)`` are ignored. Repeated calls return equal lines.

    Example, for an approved PU class of 28 students at 65 000 and an
    approved 2 500 000 accrual::

        lines = aggregate_revenues_to_bdr(snapshot, "ALM", "2024-12")
        [l.planned_amount for l in lines]  # [1820000, 2500000]
    """
    logger.info("Aggregating revenues for %s/%s", org_unit_code, period_ym)

    def in_scope(record) -> bool:
        return (
            record.is_approved
            and record.org_unit_code == org_unit_code
            and record.period_ym == period_ym
        )

    lines: List[BudgetLine] = []

    for item in snapshot.contingent:
        if not in_scope(item):
            continue
        if plain(item.funding_source) != FundingSource.PU.value or not item.tariff_amount:
            continue
        revenue = item.student_count * item.tariff_amount
        lines.append(
            BudgetLine(
                id=ledger_line_id("stg_contingent", item.id),
                org_unit_code=org_unit_code,
                period_ym=period_ym,
                user_id=item.user_id,
                revenue_type=RevenueType.TUITION,
                funding_source=FundingSource.PU.value,
                article_code=TUITION_ARTICLE_CODE,
                planned_amount=revenue,
                actual_amount=revenue,
                calculation_base=(
                    f"Contingent: {item.student_count} students × {item.tariff_amount:,.0f} ₸"
                ),
                source_table="stg_contingent",
                source_record_id=item.id,
            )
        )

    for accrual in snapshot.accruals:
        if not in_scope(accrual):
            continue
        lines.append(
            BudgetLine(
                id=ledger_line_id("stg_income_accruals", accrual.id),
                org_unit_code=org_unit_code,
                period_ym=period_ym,
                user_id=accrual.user_id,
                revenue_type=get_revenue_type(accrual.funding_source),
                funding_source=plain(accrual.funding_source),
                article_code=accrual.article_code,
                planned_amount=accrual.accrual_amount,
                actual_amount=accrual.accrual_amount,
                calculation_base=accrual.calculation_base or DIRECT_ACCRUAL_BASE,
                source_table="stg_income_accruals",
                source_record_id=accrual.id,
            )
        )

    logger.debug("Produced %d revenue lines for %s/%s", len(lines), org_unit_code, period_ym)
    return lines


__all__ = ["aggregate_revenues_to_bdr", "TUITION_ARTICLE_CODE", "DIRECT_ACCRUAL_BASE"]
