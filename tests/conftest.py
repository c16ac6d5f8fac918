"""Shared pytest fixtures and record factories for staging data tests."""

from __future__ import annotations

from datetime import date

import pytest

from branch_budget.core.enums import PaymentStatus, RecordStatus
from branch_budget.core.schemas import (
    CashScheduleRecord,
    ContingentRecord,
    IncomeAccrualRecord,
    StaffingRecord,
    StagingSnapshot,
    TripRecord,
    UtilityCalculationRecord,
)

ORG = "ALM"
PERIOD = "2024-12"


def _scope(overrides: dict) -> dict:
    base = {
        "org_unit_code": ORG,
        "period_ym": PERIOD,
        "user_id": "u1",
        "status": RecordStatus.APPROVED,
    }
    base.update(overrides)
    return base


def make_contingent(**overrides) -> ContingentRecord:
    values = {
        "id": "c1",
        "program_name": "General secondary",
        "grade_level": "5",
        "student_count": 25,
        "funding_source": "PU",
        "education_profile": "general",
        "language": "RUS",
        "tariff_amount": 65_000,
    }
    values.update(overrides)
    return ContingentRecord(**_scope(values))


def make_accrual(**overrides) -> IncomeAccrualRecord:
    values = {
        "id": "a1",
        "funding_source": "RB",
        "article_code": "1.2.1",
        "accrual_amount": 12_000_000,
        "accrual_date": date(2024, 12, 1),
    }
    values.update(overrides)
    return IncomeAccrualRecord(**_scope(values))


def make_cash(**overrides) -> CashScheduleRecord:
    values = {
        "id": "p1",
        "funding_source": "RB",
        "article_code": "1.2.1",
        "amount": 12_000_000,
        "expected_date": date(2024, 12, 10),
        "payment_date": date(2024, 12, 10),
        "doc_date": date(2024, 12, 9),
        "payment_method": "bank_transfer",
        "payment_status": PaymentStatus.PAID,
    }
    values.update(overrides)
    return CashScheduleRecord(**_scope(values))


def make_staff(**overrides) -> StaffingRecord:
    values = {
        "id": "s1",
        "employee_id": "E-1",
        "full_name": "Aigerim Sadykova",
        "position": "Teacher",
        "base_salary": 250_000,
        "bonus": 50_000,
        "allowances": 0,
        "total_salary": 300_000,
    }
    values.update(overrides)
    return StaffingRecord(**_scope(values))


def make_trip(**overrides) -> TripRecord:
    values = {
        "id": "t1",
        "employee_name": "Aigerim Sadykova",
        "destination": "Astana",
        "start_date": date(2024, 12, 2),
        "end_date": date(2024, 12, 5),
        "total_amount": 120_000,
    }
    values.update(overrides)
    return TripRecord(**_scope(values))


def make_calculation(**overrides) -> UtilityCalculationRecord:
    values = {
        "id": "k1",
        "service_name": "Electricity",
        "calculation_method": "meter",
        "calculated_amount": 150_000,
        "calculation_date": date(2024, 12, 20),
    }
    values.update(overrides)
    return UtilityCalculationRecord(**_scope(values))


def make_snapshot(**domains) -> StagingSnapshot:
    return StagingSnapshot(ORG, PERIOD, **domains)


@pytest.fixture
def clean_snapshot() -> StagingSnapshot:
    """One record per domain, passing every rule, cross-check and alert."""
    return make_snapshot(
        contingent=[make_contingent()],
        accruals=[make_accrual()],
        cash_schedule=[make_cash()],
        staffing=[make_staff()],
        trips=[make_trip()],
        calculations=[make_calculation()],
    )


STAGING_YAML = """\
contingent:
  - id: c1
    org_unit_code: ALM
    period_ym: "2024-12"
    user_id: u1
    status: approved
    program_name: General secondary
    grade_level: 5
    student_count: 25
    funding_source: PU
    education_profile: general
    language: RUS
    tariff_amount: 65000
    updated_at: 2024-12-05T10:00:00
  - id: c2
    org_unit_code: ALM
    period_ym: "2024-11"
    user_id: u1
    status: draft
    program_name: General secondary
    grade_level: 6
    student_count: 20
    funding_source: RB
accruals:
  - id: a1
    org_unit_code: ALM
    period_ym: "2024-12"
    user_id: u1
    status: approved
    funding_source: RB
    article_code: "1.2.1"
    accrual_amount: 12000000
    accrual_date: 2024-12-01
cash_schedule:
  - id: p1
    org_unit_code: ALM
    period_ym: "2024-12"
    user_id: u1
    status: approved
    funding_source: RB
    article_code: "1.2.1"
    amount: 12000000
    expected_date: 2024-12-10
    payment_date: 2024-12-10
    doc_date: 2024-12-09
    payment_method: bank_transfer
    payment_status: PAID
staffing:
  - id: s1
    org_unit_code: ALM
    period_ym: "2024-12"
    user_id: u1
    status: approved
    employee_id: E-1
    full_name: Aigerim Sadykova
    position: Teacher
    base_salary: 250000
    bonus: 50000
    total_salary: 300000
trips: []
calculations: []
"""


@pytest.fixture
def staging_yaml(tmp_path):
    """Path to a small staging data file for branch ALM."""
    path = tmp_path / "staging.yaml"
    path.write_text(STAGING_YAML, encoding="utf-8")
    return path
