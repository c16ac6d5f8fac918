"""Validation system for Branch Budget Tools.

This module provides the validation framework for branch staging data:

- **Rules**: Stateless business rules (see validation/rules.py)
- **Fields**: Required-field and format checks per record (validation/fields.py)
- **Checks**: Per-domain record checks (see validation/checks/)
- **Cross-module / Alerts**: Snapshot-wide plausibility checks and alerts
- **Config**: Thresholds and severity rules (import from .config)
- **Registry**: run_validation(), print_report() - orchestration

Public API:
    ValidationResult: Aggregated validation results with report helpers
    ValidationError / ValidationWarning / ValidationInfo: Reported issues
    ErrorKind: Classification of validation errors
    run_validation: Validate a branch/period snapshot
    print_report: Display validation results to console

Usage::

    from branch_budget.validation import run_validation, print_report

    result = run_validation(snapshot)
    print_report(result)
"""

from __future__ import annotations

from .models import (
    CheckResult,
    ErrorKind,
    RuleResult,
    ValidationError,
    ValidationInfo,
    ValidationResult,
    ValidationSummary,
    ValidationWarning,
)
from .registry import print_report, run_validation

__all__ = [
    # Data models
    "CheckResult",
    "ErrorKind",
    "RuleResult",
    "ValidationError",
    "ValidationInfo",
    "ValidationResult",
    "ValidationSummary",
    "ValidationWarning",
    # Runner functions
    "run_validation",
    "print_report",
]
