"""Tests for consolidation of revenue and cash-flow lines."""

from __future__ import annotations

from datetime import date

import pytest

from branch_budget.aggregation.consolidation import consolidate_data_to_fot, consolidate_lines
from branch_budget.aggregation.models import CashFlowLine
from branch_budget.aggregation.revenues import aggregate_revenues_to_bdr
from branch_budget.core.enums import FlowType
from conftest import ORG, PERIOD, make_accrual, make_cash, make_contingent, make_snapshot


def _snapshot(accruals=None, cash=None):
    return make_snapshot(
        contingent=[
            make_contingent(student_count=28, tariff_amount=65_000),
            make_contingent(id="c2", grade_level="6", student_count=20, tariff_amount=60_000),
        ],
        accruals=accruals if accruals is not None else [make_accrual()],
        cash_schedule=cash if cash is not None else [make_cash()],
    )


def test_lines_grouped_by_funding_and_article():
    lines = consolidate_data_to_fot(_snapshot(), ORG, PERIOD)
    assert [line.id for line in lines] == ["fot_ALM_PU_1.1.1_2024-12", "fot_ALM_RB_1.2.1_2024-12"]
    tuition, budget = lines
    assert tuition.planned_revenue == 1_820_000 + 1_200_000
    assert tuition.actual_revenue == tuition.planned_revenue
    assert tuition.variance_revenue == 0
    assert tuition.source_line_ids == ("cont_c1", "cont_c2")
    assert budget.planned_revenue == 12_000_000
    assert budget.planned_cashflow == 12_000_000
    assert budget.source_line_ids == ("accr_a1", "cash_p1")


def test_unmatched_cash_flow_is_dropped():
    snap = _snapshot(cash=[make_cash(article_code="9.9.9")])
    lines = consolidate_data_to_fot(snap, ORG, PERIOD)
    assert all(line.planned_cashflow == 0 for line in lines)
    assert all("cash_p1" not in line.source_line_ids for line in lines)


def test_missing_article_code_keeps_its_own_line():
    snap = _snapshot(
        accruals=[make_accrual(), make_accrual(id="a2", article_code=None, accrual_amount=500_000)],
        cash=[make_cash(), make_cash(id="p2", article_code=None, amount=300_000)],
    )
    budget_lines = aggregate_revenues_to_bdr(snap, ORG, PERIOD)
    lines = consolidate_data_to_fot(snap, ORG, PERIOD)

    assert sum(line.planned_revenue for line in lines) == sum(
        line.planned_amount for line in budget_lines
    )
    no_article = lines[-1]
    assert no_article.funding_source == "RB"
    assert no_article.article_code is None
    assert no_article.planned_revenue == 500_000
    assert no_article.planned_cashflow == 300_000
    assert no_article.source_line_ids == ("accr_a2", "cash_p2")


def test_one_more_accrual_increases_planned_revenue_by_its_amount():
    before = consolidate_data_to_fot(_snapshot(), ORG, PERIOD)[1].planned_revenue
    snap = _snapshot(accruals=[make_accrual(), make_accrual(id="a2", accrual_amount=750_000)])
    after = consolidate_data_to_fot(snap, ORG, PERIOD)[1].planned_revenue
    assert after - before == 750_000


def test_consolidation_rules_by_funding_source():
    tuition, budget = consolidate_data_to_fot(_snapshot(), ORG, PERIOD)
    assert [r.transformation for r in tuition.consolidation_rules] == ["sum", "sum", "validate_positive"]
    assert [r.target_field for r in budget.consolidation_rules] == ["planned_revenue", "actual_revenue"]


@pytest.mark.parametrize("org, period", [(None, PERIOD), (ORG, None)], ids=["no_org", "no_period"])
def test_requires_branch_and_period(org, period, caplog):
    with caplog.at_level("WARNING"):
        assert consolidate_data_to_fot(_snapshot(), org, period) == []
    assert "requires both a branch and a period" in caplog.text


def test_outflow_subtracts():
    revenues = consolidate_data_to_fot(_snapshot(cash=[]), ORG, PERIOD)
    assert all(line.planned_cashflow == 0 for line in revenues)

    budget_lines = aggregate_revenues_to_bdr(_snapshot(), ORG, PERIOD)
    outflow = CashFlowLine(
        id="cash_x",
        org_unit_code=ORG,
        period_ym=PERIOD,
        user_id="u1",
        flow_type=FlowType.OUTFLOW,
        funding_source="RB",
        article_code="1.2.1",
        transaction_date=date(2024, 12, 10),
        document_date=date(2024, 12, 10),
        planned_amount=500_000,
        actual_amount=400_000,
        payment_method="bank_transfer",
        description="Refund",
        source_table="stg_cash_schedule",
        source_record_id="x",
    )
    lines = consolidate_lines(budget_lines, [outflow], PERIOD)
    budget = lines[1]
    assert budget.planned_cashflow == -500_000
    assert budget.actual_cashflow == -400_000
    assert budget.variance_cashflow == 100_000


def test_no_revenue_means_no_lines():
    snap = make_snapshot(cash_schedule=[make_cash()])
    assert consolidate_data_to_fot(snap, ORG, PERIOD) == []


def test_to_record():
    record = consolidate_data_to_fot(_snapshot(), ORG, PERIOD)[0].to_record()
    assert record["planned_amount"] == record["planned_revenue"] == 3_020_000.0
    assert record["variance_amount"] == 0.0
    assert record["consolidation_rules"].endswith("validate_positive(tariff_amount->planned_revenue)")
