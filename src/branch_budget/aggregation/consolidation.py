"""Consolidation of revenue and cash-flow lines (FOT ledger).

Revenue lines define the consolidated keys ``(org_unit_code, funding_source,
article_code)``. Cash-flow lines are merged only into keys that already exist
from the revenue pass; inflows add and outflows subtract. Cash-flow lines whose
key has no revenue are dropped.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd

from branch_budget.core.schemas import StagingSnapshot
from .cash_flow import aggregate_cash_flow_to_dds
from .models import (
    BudgetLine,
    CashFlowLine,
    ConsolidatedLine,
    get_consolidation_rules,
    plain,
)
from .revenues import aggregate_revenues_to_bdr

logger = logging.getLogger(__name__)


def consolidated_line_id(org_unit_code: str, funding_source: str, article_code: str, period_ym: str) -> str:
    """Deterministic id of a consolidated line.

    Examples:
        >>> consolidated_line_id("ALM", "PU", "1.1.1", "2024-12")
        'fot_ALM_PU_1.1.1_2024-12'
    """
    return f"fot_{org_unit_code}_{plain(funding_source)}_{article_code}_{period_ym}"


def _line_key(line) -> Tuple[str, Optional[str], Optional[str]]:
    return (line.org_unit_code, plain(line.funding_source), line.article_code)


def consolidate_lines(
    revenues: Sequence[BudgetLine], cash_flows: Sequence[CashFlowLine], period_ym: str
) -> List[ConsolidatedLine]:
    """Group revenue lines by key and merge matching cash flow into them.

    Keys keep the order in which they first appear among ``revenues``. A missing
    funding source or article code is a key value of its own, so no revenue
    line is lost in grouping.
    """
    if not revenues:
        if cash_flows:
            logger.debug("Dropping %d cash-flow lines: no revenue keys", len(cash_flows))
        return []

    # pandas groups on the integer key index; None in a key column would be dropped as NA
    key_index: Dict[Tuple[str, Optional[str], Optional[str]], int] = {}
    keys: List[Tuple[str, Optional[str], Optional[str]]] = []
    lineage: List[List[str]] = []
    for line in revenues:
        key = _line_key(line)
        if key not in key_index:
            key_index[key] = len(keys)
            keys.append(key)
            lineage.append([])
        lineage[key_index[key]].append(line.id)

    rev_df = pd.DataFrame(
        {
            "key": [key_index[_line_key(line)] for line in revenues],
            "user_id": [line.user_id for line in revenues],
            "planned": [float(line.planned_amount) for line in revenues],
            "actual": [float(line.actual_amount) for line in revenues],
        }
    )
    grouped = (
        rev_df.groupby("key", sort=False)
        .agg(
            planned_revenue=("planned", "sum"),
            actual_revenue=("actual", "sum"),
            user_id=("user_id", "first"),
        )
        .reset_index()
    )

    matched = [line for line in cash_flows if _line_key(line) in key_index]
    if len(matched) < len(cash_flows):
        logger.debug(
            "Dropped %d cash-flow lines without a matching revenue key",
            len(cash_flows) - len(matched),
        )

    if matched:
        for line in matched:
            lineage[key_index[_line_key(line)]].append(line.id)
        cf_df = pd.DataFrame(
            {
                "key": [key_index[_line_key(line)] for line in matched],
                "planned_cashflow": [float(line.signed_planned) for line in matched],
                "actual_cashflow": [float(line.signed_actual) for line in matched],
            }
        )
        cf_grouped = cf_df.groupby("key", sort=False)[
            ["planned_cashflow", "actual_cashflow"]
        ].sum().reset_index()
        merged = grouped.merge(cf_grouped, on="key", how="left")
    else:
        merged = grouped.assign(planned_cashflow=0.0, actual_cashflow=0.0)

    merged[["planned_cashflow", "actual_cashflow"]] = merged[
        ["planned_cashflow", "actual_cashflow"]
    ].fillna(0.0)

    lines: List[ConsolidatedLine] = []
    for row in merged.to_dict("records"):
        index = int(row["key"])
        org_unit_code, funding_source, article_code = keys[index]
        lines.append(
            ConsolidatedLine(
                id=consolidated_line_id(org_unit_code, funding_source, article_code, period_ym),
                org_unit_code=org_unit_code,
                period_ym=period_ym,
                user_id=row["user_id"],
                funding_source=funding_source,
                article_code=article_code,
                planned_revenue=float(row["planned_revenue"]),
                actual_revenue=float(row["actual_revenue"]),
                planned_cashflow=float(row["planned_cashflow"]),
                actual_cashflow=float(row["actual_cashflow"]),
                consolidation_rules=get_consolidation_rules(funding_source),
                source_line_ids=tuple(lineage[index]),
            )
        )
    return lines


def consolidate_data_to_fot(
    snapshot: StagingSnapshot,
    org_unit_code: Optional[str] = None,
    period_ym: Optional[str] = None,
) -> List[ConsolidatedLine]:
    """Consolidate one branch and period.

    Both ``org_unit_code`` and ``period_ym`` are required; without them the
    result is empty and a warning is logged.

    Example, for the same snapshot as ``aggregate_revenues_to_bdr``::

        lines = consolidate_data_to_fot(snapshot, "ALM", "2024-12")
        [l.planned_revenue for l in lines]  # [1820000.0, 2500000.0]
    """
    if not org_unit_code or not period_ym:
        logger.warning(
            "Consolidation requires both a branch and a period (got %r, %r)",
            org_unit_code,
            period_ym,
        )
        return []

    logger.info("Consolidating %s/%s", org_unit_code, period_ym)
    revenues = aggregate_revenues_to_bdr(snapshot, org_unit_code, period_ym)
    cash_flows = aggregate_cash_flow_to_dds(snapshot, org_unit_code, period_ym)
    return consolidate_lines(revenues, cash_flows, period_ym)


__all__ = ["consolidate_data_to_fot", "consolidate_lines", "consolidated_line_id"]
