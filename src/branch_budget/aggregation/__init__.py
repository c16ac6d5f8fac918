"""Aggregation of approved staging data into revenue, cash-flow and consolidated ledgers.

Public API:
    aggregate_revenues_to_bdr: Revenue ledger lines from contingent and accruals
    aggregate_cash_flow_to_dds: Cash-flow ledger lines from the receipt schedule
    consolidate_data_to_fot: Consolidated lines per funding source and article
    run_full_etl_process: Run all three stages and report counts and errors
    run_etl_from_repository: Same, loading the snapshot from a repository
    get_etl_statistics: Counts, periods and last update over staging records
"""

from __future__ import annotations

from .cash_flow import aggregate_cash_flow_to_dds
from .consolidation import consolidate_data_to_fot, consolidate_lines
from .etl import EtlResult, ProcessedRecords, run_etl_from_repository, run_full_etl_process
from .models import BudgetLine, CashFlowLine, ConsolidatedLine, ConsolidationRule, lines_to_frame
from .revenues import aggregate_revenues_to_bdr
from .statistics import EtlStatistics, count_by_status, get_etl_statistics

__all__ = [
    # Ledger models
    "BudgetLine",
    "CashFlowLine",
    "ConsolidatedLine",
    "ConsolidationRule",
    "lines_to_frame",
    # Mappers
    "aggregate_revenues_to_bdr",
    "aggregate_cash_flow_to_dds",
    "consolidate_data_to_fot",
    "consolidate_lines",
    # Pipeline
    "EtlResult",
    "ProcessedRecords",
    "run_full_etl_process",
    "run_etl_from_repository",
    # Statistics
    "EtlStatistics",
    "count_by_status",
    "get_etl_statistics",
]
