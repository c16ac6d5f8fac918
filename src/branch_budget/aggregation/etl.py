"""ETL pipeline: staging snapshot to revenue, cash-flow and consolidated ledgers.

``run_full_etl_process`` never raises: any failure is logged and returned in
``EtlResult.errors`` with ``success=False``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from branch_budget.core.context import ScopeContext
from branch_budget.core.repository import StagingRepository, load_snapshot
from branch_budget.core.schemas import StagingSnapshot
from .cash_flow import aggregate_cash_flow_to_dds
from .consolidation import consolidate_lines
from .models import BudgetLine, CashFlowLine, ConsolidatedLine
from .revenues import aggregate_revenues_to_bdr

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessedRecords:
    revenues: int = 0
    cash_flows: int = 0
    consolidated: int = 0


@dataclass
class EtlResult:
    """Outcome of one ETL run.

    Attributes:
        success: False when any stage failed.
        processed_records: Line counts per stage (partial on failure).
        errors: Failure messages.
        revenues / cash_flows / consolidated: Lines produced by each stage.
    """

    success: bool
    processed_records: ProcessedRecords
    errors: List[str] = field(default_factory=list)
    revenues: List[BudgetLine] = field(default_factory=list)
    cash_flows: List[CashFlowLine] = field(default_factory=list)
    consolidated: List[ConsolidatedLine] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "processed_records": {
                "revenues": self.processed_records.revenues,
                "cash_flows": self.processed_records.cash_flows,
                "consolidated": self.processed_records.consolidated,
            },
            "errors": list(self.errors),
        }


def run_full_etl_process(snapshot: StagingSnapshot, org_unit_code: str, period_ym: str) -> EtlResult:
    """Run revenue, cash-flow and consolidation stages for one branch and period.

    Example::

        result = run_full_etl_process(snapshot, "ALM", "2024-12")
        if not result.success:
            print(result.errors)
    """
    revenues: List[BudgetLine] = []
    cash_flows: List[CashFlowLine] = []
    consolidated: List[ConsolidatedLine] = []
    try:
        logger.info("Starting ETL for %s/%s", org_unit_code, period_ym)
        revenues = aggregate_revenues_to_bdr(snapshot, org_unit_code, period_ym)
        cash_flows = aggregate_cash_flow_to_dds(snapshot, org_unit_code, period_ym)
        consolidated = consolidate_lines(revenues, cash_flows, period_ym)
    except Exception as e:  # pipeline boundary: report, never rethrow
        logger.exception("ETL failed for %s/%s", org_unit_code, period_ym)
        return EtlResult(
            success=False,
            processed_records=ProcessedRecords(len(revenues), len(cash_flows), len(consolidated)),
            errors=[str(e) or type(e).__name__],
            revenues=revenues,
            cash_flows=cash_flows,
            consolidated=consolidated,
        )

    processed = ProcessedRecords(len(revenues), len(cash_flows), len(consolidated))
    logger.info(
        "ETL finished for %s/%s: %d revenues, %d cash flows, %d consolidated",
        org_unit_code,
        period_ym,
        processed.revenues,
        processed.cash_flows,
        processed.consolidated,
    )
    return EtlResult(
        success=True,
        processed_records=processed,
        revenues=revenues,
        cash_flows=cash_flows,
        consolidated=consolidated,
    )


async def run_etl_from_repository(repository: StagingRepository, scope: ScopeContext) -> EtlResult:
    """Load the approved snapshot for ``scope`` and run the ETL over it."""
    try:
        snapshot = await load_snapshot(repository, scope, approved_only=True)
    except Exception as e:  # repository failures are reported like pipeline failures
        logger.exception("Failed to load staging data for %s", scope.key)
        return EtlResult(
            success=False,
            processed_records=ProcessedRecords(),
            errors=[str(e) or type(e).__name__],
        )
    return run_full_etl_process(snapshot, scope.org_unit_code, scope.period_ym)


__all__ = ["ProcessedRecords", "EtlResult", "run_full_etl_process", "run_etl_from_repository"]
