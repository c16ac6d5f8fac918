"""Tests for per-record field validation."""

from __future__ import annotations

from datetime import date

import pytest

from branch_budget.validation.fields import validate_record
from conftest import (
    make_accrual,
    make_calculation,
    make_cash,
    make_contingent,
    make_staff,
    make_trip,
)


@pytest.mark.parametrize(
    "factory",
    [make_contingent, make_accrual, make_cash, make_staff, make_trip, make_calculation],
    ids=["contingent", "accrual", "cash", "staff", "trip", "calculation"],
)
def test_well_formed_records_are_valid(factory):
    outcome = validate_record(factory())
    assert outcome.is_valid
    assert outcome.error is None


@pytest.mark.parametrize("tariff", [None, 0], ids=["missing", "zero"])
def test_fee_paying_contingent_requires_positive_tariff(tariff):
    outcome = validate_record(make_contingent(tariff_amount=tariff))
    assert not outcome.is_valid
    assert [f for f, _ in outcome.issues] == ["tariff_amount"]


def test_budget_contingent_without_tariff_is_valid():
    assert validate_record(make_contingent(funding_source="RB", tariff_amount=None)).is_valid


@pytest.mark.parametrize(
    "record, field",
    [
        (make_contingent(org_unit_code="A"), "org_unit_code"),
        (make_accrual(period_ym="2024/12"), "period_ym"),
        (make_accrual(user_id=""), "user_id"),
        (make_contingent(student_count=0), "student_count"),
        (make_accrual(funding_source="XX"), "funding_source"),
        (make_accrual(article_code=""), "article_code"),
        (make_cash(payment_method=""), "payment_method"),
        (make_cash(doc_date=date(2024, 12, 11)), "doc_date"),
        (make_staff(base_salary=-1), "base_salary"),
        (make_trip(end_date=date(2024, 12, 1)), "end_date"),
        (make_calculation(calculated_amount=0), "calculated_amount"),
    ],
    ids=[
        "short_org",
        "bad_period",
        "no_user",
        "no_students",
        "unknown_funding",
        "no_article",
        "no_payment_method",
        "doc_after_payment",
        "negative_salary",
        "end_before_start",
        "zero_calculation",
    ],
)
def test_field_issues(record, field):
    outcome = validate_record(record)
    assert not outcome.is_valid
    assert field in [f for f, _ in outcome.issues]
    assert outcome.error.startswith(f"{outcome.issues[0][0]}: ")
