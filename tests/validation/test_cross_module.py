"""Tests for cross-module plausibility checks."""

from __future__ import annotations

import pytest

from branch_budget.core.enums import EmploymentStatus
from branch_budget.validation.cross_module import (
    validate_budget_balance,
    validate_revenue_vs_contingent,
    validate_staffing_vs_contingent,
)
from conftest import make_accrual, make_calculation, make_contingent, make_staff, make_trip


class TestRevenueVsContingent:
    def test_revenue_close_to_norm(self):
        result = validate_revenue_vs_contingent([make_contingent()], [make_accrual()])
        assert result.is_valid
        assert result.warning is None

    def test_revenue_far_from_norm_warns(self):
        result = validate_revenue_vs_contingent(
            [make_contingent()], [make_accrual(accrual_amount=2_000_000)]
        )
        assert not result.is_valid
        assert "Expected: 12,500,000 ₸" in result.warning
        assert result.error is None

    def test_revenue_without_students_warns(self):
        result = validate_revenue_vs_contingent([], [make_accrual()])
        assert not result.is_valid
        assert "no students" in result.warning

    def test_nothing_at_all_is_valid(self):
        assert validate_revenue_vs_contingent([], []).is_valid


class TestStaffingVsContingent:
    @pytest.mark.parametrize(
        "students, valid, prefix",
        [(25, True, None), (26, False, "Understaffed"), (8, True, None), (7, False, "Overstaffed")],
        ids=["max_ratio", "over_max_ratio", "min_ratio", "under_min_ratio"],
    )
    def test_ratio_bounds(self, students, valid, prefix):
        result = validate_staffing_vs_contingent(
            [make_contingent(student_count=students)], [make_staff()]
        )
        assert result.is_valid is valid
        if prefix:
            assert result.warning.startswith(prefix)

    def test_inactive_staff_are_not_counted(self):
        result = validate_staffing_vs_contingent(
            [make_contingent()],
            [make_staff(employment_status=EmploymentStatus.ON_LEAVE)],
        )
        assert not result.is_valid
        assert result.warning.startswith("Understaffed")

    def test_no_staff_and_no_students(self):
        assert validate_staffing_vs_contingent([], []).is_valid


class TestBudgetBalance:
    def test_balanced_budget(self):
        result = validate_budget_balance(
            [make_accrual()], [make_staff()], [make_trip()], [make_calculation()]
        )
        assert result.is_valid
        assert result.balance == 11_430_000
        assert result.profit_margin == pytest.approx(95.25)
        assert result.message.startswith("Budget is balanced. Surplus: 11,430,000 ₸")

    def test_deficit_is_error(self):
        result = validate_budget_balance(
            [make_accrual(accrual_amount=200_000)], [make_staff()], [make_trip()], []
        )
        assert not result.is_valid
        assert result.balance == -220_000
        assert "exceed revenue" in result.error

    def test_low_margin_warns(self):
        result = validate_budget_balance(
            [make_accrual(accrual_amount=1_000_000)],
            [make_staff(total_salary=980_000)],
            [],
            [],
        )
        assert not result.is_valid
        assert result.error is None
        assert result.warning.startswith("Low profit margin: 2.0%")

    def test_no_revenue_counts_as_zero_margin(self):
        result = validate_budget_balance([], [], [], [])
        assert not result.is_valid
        assert result.error is None
        assert result.message is None
        assert result.balance == 0
        assert result.profit_margin == 0.0
        assert result.warning.startswith("Low profit margin: 0.0%")
