"""Cash-flow ledger (DDS) mapper."""

from __future__ import annotations

import logging
from typing import List

from branch_budget.core.enums import FlowType
from branch_budget.core.schemas import StagingSnapshot
from branch_budget.core.utils import ledger_line_id
from .models import CashFlowLine, plain

logger = logging.getLogger(__name__)

DEFAULT_DESCRIPTION = "Cash receipt"


def aggregate_cash_flow_to_dds(
    snapshot: StagingSnapshot, org_unit_code: str, period_ym: str
) -> List[CashFlowLine]:
    """Map approved cash schedule items to inflow lines (planned equals actual)."""
    logger.info("Aggregating cash flow for %s/%s", org_unit_code, period_ym)
    lines = [
        CashFlowLine(
            id=ledger_line_id("stg_cash_schedule", item.id),
            org_unit_code=org_unit_code,
            period_ym=period_ym,
            user_id=item.user_id,
            flow_type=FlowType.INFLOW,
            funding_source=plain(item.funding_source),
            article_code=item.article_code,
            transaction_date=item.payment_date,
            document_date=item.doc_date,
            planned_amount=item.amount,
            actual_amount=item.amount,
            payment_method=item.payment_method,
            description=item.description or DEFAULT_DESCRIPTION,
            source_table="stg_cash_schedule",
            source_record_id=item.id,
        )
        for item in snapshot.cash_schedule
        if item.is_approved and item.org_unit_code == org_unit_code and item.period_ym == period_ym
    ]
    logger.debug("Produced %d cash-flow lines for %s/%s", len(lines), org_unit_code, period_ym)
    return lines


__all__ = ["aggregate_cash_flow_to_dds", "DEFAULT_DESCRIPTION"]
