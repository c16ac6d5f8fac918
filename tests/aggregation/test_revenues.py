"""Tests for the revenue ledger mapper."""

from __future__ import annotations

from branch_budget.aggregation.revenues import aggregate_revenues_to_bdr
from branch_budget.core.enums import RecordStatus, RevenueType
from conftest import ORG, PERIOD, make_accrual, make_contingent, make_snapshot


def _snapshot():
    return make_snapshot(
        contingent=[
            make_contingent(student_count=28, tariff_amount=65_000),
            make_contingent(id="c2", funding_source="RB", tariff_amount=None),
            make_contingent(id="c3", status=RecordStatus.SUBMITTED),
        ],
        accruals=[
            make_accrual(funding_source="RB", calculation_base="State order 2024"),
            make_accrual(id="a2", funding_source="DOTA", accrual_amount=300_000),
            make_accrual(id="a3", funding_source="OTHER", accrual_amount=5_000),
            make_accrual(id="a4", status=RecordStatus.DRAFT),
        ],
    )


def test_contingent_line():
    lines = aggregate_revenues_to_bdr(_snapshot(), ORG, PERIOD)
    tuition = lines[0]
    assert tuition.id == "cont_c1"
    assert tuition.revenue_type == RevenueType.TUITION
    assert tuition.funding_source == "PU"
    assert tuition.article_code == "1.1.1"
    assert tuition.planned_amount == 1_820_000
    assert tuition.actual_amount == 1_820_000
    assert tuition.variance_amount == 0
    assert tuition.source_table == "stg_contingent"
    assert tuition.source_record_id == "c1"
    assert "28 students" in tuition.calculation_base


def test_accrual_lines_and_revenue_types():
    lines = aggregate_revenues_to_bdr(_snapshot(), ORG, PERIOD)
    accruals = [line for line in lines if line.source_table == "stg_income_accruals"]
    assert [line.id for line in accruals] == ["accr_a1", "accr_a2", "accr_a3"]
    assert [line.revenue_type for line in accruals] == [
        RevenueType.BUDGET,
        RevenueType.GRANTS,
        RevenueType.OTHER,
    ]
    assert accruals[0].calculation_base == "State order 2024"
    assert accruals[1].calculation_base == "Direct accrual"


def test_only_approved_in_scope_records_are_used():
    lines = aggregate_revenues_to_bdr(_snapshot(), ORG, PERIOD)
    assert len(lines) == 4
    assert aggregate_revenues_to_bdr(_snapshot(), "AST", PERIOD) == []


def test_mapper_is_idempotent():
    snap = _snapshot()
    assert aggregate_revenues_to_bdr(snap, ORG, PERIOD) == aggregate_revenues_to_bdr(snap, ORG, PERIOD)


def test_to_record_has_plain_values():
    record = aggregate_revenues_to_bdr(_snapshot(), ORG, PERIOD)[0].to_record()
    assert record["revenue_type"] == "tuition"
    assert record["planned_amount"] == 1_820_000.0
    assert record["variance_amount"] == 0.0
    assert isinstance(record["planned_amount"], float)
