"""Tests for validation data models and report generation."""

from __future__ import annotations

import json

import pytest

from branch_budget.validation.models import (
    CheckResult,
    ErrorKind,
    RuleResult,
    ValidationError,
    ValidationInfo,
    ValidationResult,
    ValidationSummary,
    ValidationWarning,
)


@pytest.fixture
def failed_result() -> ValidationResult:
    return ValidationResult(
        is_valid=False,
        errors=[
            ValidationError("Staffing", "Employee E-7", "Base salary is below the minimum wage"),
            ValidationError("Revenue", "Accrual 2", "Duplicate", kind=ErrorKind.UNIQUENESS),
            ValidationError("Staffing", "Employee E-8", "Bonus too high"),
        ],
        warnings=[ValidationWarning("Cross-check", "Overstaffed")],
        infos=[ValidationInfo("Budget", "Budget is balanced")],
        summary=ValidationSummary(
            total_records=12, valid_records=9, error_count=3, warning_count=1, info_count=1
        ),
        org_unit_code="ALM",
        period_ym="2024-12",
    )


class TestRuleResult:
    def test_ok_and_fail(self):
        assert RuleResult.ok() == RuleResult(True)
        failed = RuleResult.fail("boom", ErrorKind.UNIQUENESS)
        assert failed.error == "boom"
        assert failed.kind == ErrorKind.UNIQUENESS

    def test_valid_result_cannot_carry_error(self):
        with pytest.raises(ValueError, match="must not carry an error"):
            RuleResult(True, "oops")

    def test_invalid_result_needs_message(self):
        with pytest.raises(ValueError, match="requires an error message"):
            RuleResult(False)


class TestCheckResult:
    def test_passed_with_failures_rejected(self):
        with pytest.raises(ValueError, match="passed=True requires fail_count=0"):
            CheckResult("trips", "OPEX", records_checked=1, passed=True, fail_count=1)

    def test_failed_without_failures_rejected(self):
        with pytest.raises(ValueError, match="passed=False requires fail_count > 0"):
            CheckResult("trips", "OPEX", records_checked=1, passed=False, fail_count=0)

    def test_fail_count_must_match_errors(self):
        with pytest.raises(ValueError, match="fail_count must equal"):
            CheckResult("trips", "OPEX", records_checked=1, passed=False, fail_count=2,
                        errors=[ValidationError("OPEX", "Trip 1", "x")])

    def test_more_invalid_records_than_checked_rejected(self):
        with pytest.raises(ValueError, match="cannot exceed records_checked"):
            CheckResult(
                "trips",
                "OPEX",
                records_checked=0,
                passed=False,
                fail_count=1,
                errors=[ValidationError("OPEX", "Trip 1", "x")],
                invalid_record_ids=("trips:t1",),
            )


class TestValidationResult:
    def test_has_errors(self, failed_result):
        assert failed_result.has_errors()

    def test_strict_mode_counts_warnings(self):
        result = ValidationResult(
            is_valid=True,
            errors=[],
            warnings=[ValidationWarning("Budget", "Low profit margin")],
            infos=[],
            summary=ValidationSummary(1, 1, 0, 1, 0),
        )
        assert not result.has_errors()
        assert result.has_errors(strict=True)

    def test_errors_by_module_keeps_order(self, failed_result):
        grouped = failed_result.errors_by_module()
        assert list(grouped) == ["Staffing", "Revenue"]
        assert len(grouped["Staffing"]) == 2

    def test_summary_text(self, failed_result):
        assert failed_result.summary_text() == (
            "Validation Summary:\n"
            "  Scope: ALM / 2024-12\n"
            "  Records: 12 checked (9 valid)\n"
            "  Issues: 3 errors, 1 warnings, 1 infos"
        )

    def test_to_json_uses_plain_values(self, failed_result):
        payload = json.loads(failed_result.to_json())
        assert payload["is_valid"] is False
        assert payload["errors"][1]["kind"] == "uniqueness"
        assert payload["summary"]["valid_records"] == 9
        assert "generated_at" in payload

    def test_to_markdown(self, failed_result):
        md = failed_result.to_markdown()
        assert md.startswith("# Validation Report: ALM / 2024-12")
        assert "### Staffing (2)" in md
        assert "- **Employee E-7**: Base salary is below the minimum wage" in md
        assert "## ⚠️ Warnings" in md

    def test_console_summary_lists_issues(self, failed_result):
        text = failed_result.to_console_summary()
        assert "❌ Revenue | Accrual 2: Duplicate" in text
        assert "⚠️ Cross-check: Overstaffed" in text
