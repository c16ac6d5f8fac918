"""Tests for the ETL pipeline."""

from __future__ import annotations

import asyncio
from unittest.mock import patch

from branch_budget.aggregation.etl import run_etl_from_repository, run_full_etl_process
from branch_budget.core.context import ScopeContext
from branch_budget.core.enums import RecordStatus
from branch_budget.core.repository import InMemoryStagingRepository, RepositoryError
from conftest import ORG, PERIOD, make_accrual, make_cash, make_contingent, make_snapshot


def _snapshot():
    return make_snapshot(
        contingent=[
            make_contingent(id="c1", grade_level="5"),
            make_contingent(id="c2", grade_level="6"),
            make_contingent(id="c3", grade_level="7"),
        ],
        accruals=[
            make_accrual(id="a1"),
            make_accrual(id="a2", funding_source="DOTA", accrual_amount=300_000),
        ],
        cash_schedule=[make_cash()],
    )


def test_full_etl_counts():
    result = run_full_etl_process(_snapshot(), ORG, PERIOD)
    assert result.success
    assert result.errors == []
    assert result.processed_records.revenues == 5
    assert result.processed_records.cash_flows == 1
    assert result.processed_records.consolidated == 3
    assert len(result.revenues) == 5
    assert [line.id for line in result.consolidated][0] == "fot_ALM_PU_1.1.1_2024-12"


def test_etl_to_dict():
    payload = run_full_etl_process(_snapshot(), ORG, PERIOD).to_dict()
    assert payload == {
        "success": True,
        "processed_records": {"revenues": 5, "cash_flows": 1, "consolidated": 3},
        "errors": [],
    }


def test_etl_failure_is_reported_not_raised(caplog):
    with patch(
        "branch_budget.aggregation.etl.aggregate_cash_flow_to_dds",
        side_effect=RuntimeError("ledger unavailable"),
    ):
        result = run_full_etl_process(_snapshot(), ORG, PERIOD)
    assert not result.success
    assert result.errors == ["ledger unavailable"]
    assert result.processed_records.revenues == 5
    assert result.processed_records.cash_flows == 0
    assert "ETL failed for ALM/2024-12" in caplog.text


def test_etl_from_repository_uses_approved_records_only():
    repo = InMemoryStagingRepository(
        [
            make_contingent(),
            make_contingent(id="c2", status=RecordStatus.DRAFT),
            make_accrual(),
        ]
    )
    result = asyncio.run(run_etl_from_repository(repo, ScopeContext(ORG, PERIOD)))
    assert result.success
    assert result.processed_records.revenues == 2


def test_etl_from_repository_reports_repository_failure():
    repo = InMemoryStagingRepository()
    with patch.object(
        InMemoryStagingRepository,
        "find_by_org_unit_and_period",
        side_effect=RepositoryError("database is locked"),
    ):
        result = asyncio.run(run_etl_from_repository(repo, ScopeContext(ORG, PERIOD)))
    assert not result.success
    assert result.errors == ["database is locked"]
    assert result.processed_records.revenues == 0
