"""Ledger line models produced by the aggregation pipeline.

- BudgetLine: one revenue line (BDR ledger)
- CashFlowLine: one cash movement (DDS ledger)
- ConsolidatedLine: revenue and cash flow per (branch, funding source, article)
- ConsolidationRule: declarative description of how a consolidated field is built

Variances are derived properties and are never stored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pandas as pd

from branch_budget.core.enums import FlowType, FundingSource, RevenueType


def plain(value: Any) -> Any:
    """Enum members become their values; other values pass through."""
    return value.value if isinstance(value, Enum) else value


def get_revenue_type(funding_source: str) -> RevenueType:
    """Map a funding source to its revenue type.

    Examples:
        >>> get_revenue_type("DOTA")
        <RevenueType.GRANTS: 'grants'>
    """
    return {
        FundingSource.PU.value: RevenueType.TUITION,
        FundingSource.RB.value: RevenueType.BUDGET,
        FundingSource.DOTA.value: RevenueType.GRANTS,
    }.get(plain(funding_source), RevenueType.OTHER)


@dataclass(frozen=True)
class ConsolidationRule:
    rule_type: str
    source_field: str
    target_field: str
    transformation: str

    @property
    def label(self) -> str:
        return f"{self.transformation}({self.source_field}->{self.target_field})"


def get_consolidation_rules(funding_source: str) -> Tuple[ConsolidationRule, ...]:
    """Rules attached to a consolidated key.

    Every key sums planned and actual amounts into revenue; fee-paying (PU)
    keys also require a positive tariff.
    """
    rules = [
        ConsolidationRule("mapping", "planned_amount", "planned_revenue", "sum"),
        ConsolidationRule("mapping", "actual_amount", "actual_revenue", "sum"),
    ]
    if plain(funding_source) == FundingSource.PU.value:
        rules.append(
            ConsolidationRule("validation", "tariff_amount", "planned_revenue", "validate_positive")
        )
    return tuple(rules)


@dataclass(frozen=True)
class BudgetLine:
    """A revenue ledger line traced back to one staging record.

    Attributes:
        id: Deterministic id derived from the source table and record id.
        revenue_type: Tuition, budget, grants or other.
        calculation_base: Human-readable derivation of the amount.
        source_table: Staging table the line was derived from.
        source_record_id: Id of the source staging record.
    """

    id: str
    org_unit_code: str
    period_ym: str
    user_id: str
    revenue_type: RevenueType
    funding_source: str
    article_code: str
    planned_amount: float
    actual_amount: float
    calculation_base: str
    source_table: str
    source_record_id: str

    @property
    def variance_amount(self) -> float:
        return self.actual_amount - self.planned_amount

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "org_unit_code": self.org_unit_code,
            "period_ym": self.period_ym,
            "user_id": self.user_id,
            "revenue_type": plain(self.revenue_type),
            "funding_source": plain(self.funding_source),
            "article_code": self.article_code,
            "planned_amount": float(self.planned_amount),
            "actual_amount": float(self.actual_amount),
            "variance_amount": float(self.variance_amount),
            "calculation_base": self.calculation_base,
            "source_table": self.source_table,
            "source_record_id": self.source_record_id,
        }


@dataclass(frozen=True)
class CashFlowLine:
    """A cash movement ledger line traced back to one staging record."""

    id: str
    org_unit_code: str
    period_ym: str
    user_id: str
    flow_type: FlowType
    funding_source: str
    article_code: str
    transaction_date: date
    document_date: date
    planned_amount: float
    actual_amount: float
    payment_method: str
    description: str
    source_table: str
    source_record_id: str

    @property
    def variance_amount(self) -> float:
        return self.actual_amount - self.planned_amount

    @property
    def signed_planned(self) -> float:
        return self.planned_amount if self.flow_type == FlowType.INFLOW else -self.planned_amount

    @property
    def signed_actual(self) -> float:
        return self.actual_amount if self.flow_type == FlowType.INFLOW else -self.actual_amount

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "org_unit_code": self.org_unit_code,
            "period_ym": self.period_ym,
            "user_id": self.user_id,
            "flow_type": plain(self.flow_type),
            "funding_source": plain(self.funding_source),
            "article_code": self.article_code,
            "transaction_date": self.transaction_date.isoformat(),
            "document_date": self.document_date.isoformat(),
            "planned_amount": float(self.planned_amount),
            "actual_amount": float(self.actual_amount),
            "variance_amount": float(self.variance_amount),
            "payment_method": self.payment_method,
            "description": self.description,
            "source_table": self.source_table,
            "source_record_id": self.source_record_id,
        }


@dataclass(frozen=True)
class ConsolidatedLine:
    """Revenue and cash flow of one (branch, funding source, article) key in a period.

    ``planned_expenses`` and ``actual_expenses`` are reserved and stay 0 until
    expense lines are consolidated.
    """

    id: str
    org_unit_code: str
    period_ym: str
    user_id: str
    funding_source: str
    article_code: str
    planned_revenue: float = 0.0
    actual_revenue: float = 0.0
    planned_expenses: float = 0.0
    actual_expenses: float = 0.0
    planned_cashflow: float = 0.0
    actual_cashflow: float = 0.0
    consolidation_rules: Tuple[ConsolidationRule, ...] = ()
    source_line_ids: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def key(self) -> Tuple[str, str, str]:
        return (self.org_unit_code, plain(self.funding_source), self.article_code)

    @property
    def variance_revenue(self) -> float:
        return self.actual_revenue - self.planned_revenue

    @property
    def variance_expenses(self) -> float:
        return self.actual_expenses - self.planned_expenses

    @property
    def variance_cashflow(self) -> float:
        return self.actual_cashflow - self.planned_cashflow

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "org_unit_code": self.org_unit_code,
            "period_ym": self.period_ym,
            "user_id": self.user_id,
            "funding_source": plain(self.funding_source),
            "article_code": self.article_code,
            "planned_amount": float(self.planned_revenue),
            "actual_amount": float(self.actual_revenue),
            "variance_amount": float(self.variance_revenue),
            "planned_revenue": float(self.planned_revenue),
            "actual_revenue": float(self.actual_revenue),
            "variance_revenue": float(self.variance_revenue),
            "planned_expenses": float(self.planned_expenses),
            "actual_expenses": float(self.actual_expenses),
            "variance_expenses": float(self.variance_expenses),
            "planned_cashflow": float(self.planned_cashflow),
            "actual_cashflow": float(self.actual_cashflow),
            "variance_cashflow": float(self.variance_cashflow),
            "consolidation_rules": "; ".join(r.label for r in self.consolidation_rules),
            "source_line_ids": " ".join(self.source_line_ids),
        }


def lines_to_frame(lines: Iterable[Any], columns: Optional[List[str]] = None) -> pd.DataFrame:
    """Tabulate ledger lines for exporters.

    Args:
        lines: Any ledger lines exposing ``to_record()``.
        columns: Column order to use when ``lines`` is empty.
    """
    records = [line.to_record() for line in lines]
    if not records:
        return pd.DataFrame(columns=columns or [])
    return pd.DataFrame.from_records(records)


__all__ = [
    "BudgetLine",
    "CashFlowLine",
    "ConsolidatedLine",
    "ConsolidationRule",
    "get_consolidation_rules",
    "get_revenue_type",
    "lines_to_frame",
    "plain",
]
