"""Tests for ledger line helpers."""

from __future__ import annotations

import pytest

from branch_budget.aggregation.models import (
    BudgetLine,
    get_consolidation_rules,
    get_revenue_type,
    lines_to_frame,
)
from branch_budget.core.enums import FundingSource, RevenueType


@pytest.mark.parametrize(
    "funding, revenue_type",
    [
        ("PU", RevenueType.TUITION),
        ("RB", RevenueType.BUDGET),
        (FundingSource.DOTA, RevenueType.GRANTS),
        ("SPONSOR", RevenueType.OTHER),
    ],
    ids=["fees", "budget", "subsidy_enum", "unknown"],
)
def test_get_revenue_type(funding, revenue_type):
    assert get_revenue_type(funding) is revenue_type


def test_consolidation_rules():
    assert len(get_consolidation_rules("RB")) == 2
    pu_rules = get_consolidation_rules(FundingSource.PU)
    assert pu_rules[-1].rule_type == "validation"
    assert pu_rules[-1].source_field == "tariff_amount"


def test_variance_is_derived():
    line = BudgetLine(
        id="accr_a1",
        org_unit_code="ALM",
        period_ym="2024-12",
        user_id="u1",
        revenue_type=RevenueType.BUDGET,
        funding_source="RB",
        article_code="1.2.1",
        planned_amount=1_000,
        actual_amount=900,
        calculation_base="Direct accrual",
        source_table="stg_income_accruals",
        source_record_id="a1",
    )
    assert line.variance_amount == -100
    frame = lines_to_frame([line])
    assert frame.loc[0, "variance_amount"] == -100.0
    assert list(frame.columns)[:3] == ["id", "org_unit_code", "period_ym"]


def test_lines_to_frame_empty():
    frame = lines_to_frame([], columns=["id", "planned_amount"])
    assert frame.empty
    assert list(frame.columns) == ["id", "planned_amount"]
