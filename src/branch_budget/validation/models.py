"""Validation data models.

This module defines core data structures for validation results:
- RuleResult: Outcome of a single business-rule predicate
- CheckResult: Outcome of one per-domain record check
- ValidationError / ValidationWarning / ValidationInfo: Reported issues
- ValidationResult: Aggregated results for a branch/period snapshot
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class ErrorKind(str, Enum):
    """Classification of a validation error."""

    FIELD = "field"  # single-record range/required-field violation
    UNIQUENESS = "uniqueness"  # duplicate key across sibling records
    CROSS_MODULE = "cross_module"  # systemic inconsistency across domains
    ALERT = "alert"  # operational alert raised as an error


@dataclass(frozen=True)
class RuleResult:
    """Result of a business-rule predicate.

    Attributes:
        is_valid: True if the record satisfies the rule.
        error: Human-readable message when ``is_valid`` is False.
        kind: Error classification when ``is_valid`` is False.

    Examples:
        >>> RuleResult.ok().is_valid
        True
        >>> RuleResult.fail("Too many students").error
        'Too many students'
    """

    is_valid: bool
    error: Optional[str] = None
    kind: Optional[ErrorKind] = None

    def __post_init__(self) -> None:
        """Validate field constraints."""
        if self.is_valid and self.error is not None:
            raise ValueError("is_valid=True must not carry an error message")
        if not self.is_valid and not self.error:
            raise ValueError("is_valid=False requires an error message")

    @classmethod
    def ok(cls) -> "RuleResult":
        return cls(True)

    @classmethod
    def fail(cls, error: str, kind: ErrorKind = ErrorKind.FIELD) -> "RuleResult":
        return cls(False, error, kind)


@dataclass(frozen=True)
class ValidationError:
    module: str
    field: str
    message: str
    severity: str = "error"
    kind: ErrorKind = ErrorKind.FIELD


@dataclass(frozen=True)
class ValidationWarning:
    module: str
    message: str


@dataclass(frozen=True)
class ValidationInfo:
    module: str
    message: str


@dataclass(frozen=True)
class CheckResult:
    """Result of a per-domain record check.

    Attributes:
        check_id: Unique identifier for the check (e.g., "staffing").
        module: Module label used in reported errors.
        records_checked: Number of records examined.
        passed: True if no record violated a rule.
        fail_count: Number of rule violations found (0 if passed).
        errors: One ValidationError per violation.
        invalid_record_ids: Keys ("domain:id") of records with at least one violation.
    """

    check_id: str
    module: str
    records_checked: int
    passed: bool
    fail_count: int
    errors: List[ValidationError] = field(default_factory=list)
    invalid_record_ids: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate field constraints."""
        if self.passed and self.fail_count != 0:
            raise ValueError("passed=True requires fail_count=0")
        if not self.passed and self.fail_count == 0:
            raise ValueError("passed=False requires fail_count > 0")
        if self.fail_count != len(self.errors):
            raise ValueError("fail_count must equal the number of errors")
        if len(self.invalid_record_ids) > self.records_checked:
            raise ValueError("invalid_record_ids cannot exceed records_checked")


@dataclass(frozen=True)
class ValidationSummary:
    total_records: int
    valid_records: int
    error_count: int
    warning_count: int
    info_count: int


@dataclass
class ValidationResult:
    """Aggregated validation results for a branch/period snapshot.

    Attributes:
        is_valid: True when no errors were found.
        errors: Ordered errors (record rules first, then cross-module, then alerts).
        warnings: Non-blocking plausibility warnings.
        infos: Informational messages.
        summary: Record and issue counts.
        org_unit_code: Branch that was validated.
        period_ym: Period that was validated.
    """

    is_valid: bool
    errors: List[ValidationError]
    warnings: List[ValidationWarning]
    infos: List[ValidationInfo]
    summary: ValidationSummary
    org_unit_code: str = ""
    period_ym: str = ""

    def has_errors(self, strict: bool = False) -> bool:
        """Check if validation failed.

        Args:
            strict: If True, treat warnings as errors. Default False.
        """
        if self.errors:
            return True
        return strict and bool(self.warnings)

    def errors_by_module(self) -> Dict[str, List[ValidationError]]:
        grouped: Dict[str, List[ValidationError]] = {}
        for err in self.errors:
            grouped.setdefault(err.module, []).append(err)
        return grouped

    def summary_text(self) -> str:
        """Generate a concise text summary of validation results.

        Example output::

            Validation Summary:
              Scope: ALM / 2024-12
              Records: 12 checked (10 valid)
              Issues: 3 errors, 2 warnings, 1 infos
        """
        s = self.summary
        return (
            f"Validation Summary:\n"
            f"  Scope: {self.org_unit_code} / {self.period_ym}\n"
            f"  Records: {s.total_records} checked ({s.valid_records} valid)\n"
            f"  Issues: {s.error_count} errors, {s.warning_count} warnings, "
            f"{s.info_count} infos"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "org_unit_code": self.org_unit_code,
            "period_ym": self.period_ym,
            "is_valid": self.is_valid,
            "errors": [
                {**asdict(e), "kind": e.kind.value} for e in self.errors
            ],
            "warnings": [asdict(w) for w in self.warnings],
            "infos": [asdict(i) for i in self.infos],
            "summary": asdict(self.summary),
        }

    def to_json(self) -> str:
        """Generate detailed JSON validation report."""
        import json
        from datetime import datetime

        payload = self.to_dict()
        payload["generated_at"] = datetime.now().isoformat()
        return json.dumps(payload, indent=2, ensure_ascii=False)

    def to_markdown(self) -> str:
        """Generate detailed Markdown validation report.

        Returns:
            Formatted Markdown string with a summary section followed by
            errors grouped by module, warnings and infos.
        """
        from datetime import datetime

        s = self.summary
        lines = [
            f"# Validation Report: {self.org_unit_code} / {self.period_ym}",
            "",
            f"**Generated:** {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
            f"**Status:** {'✅ Valid' if self.is_valid else '❌ Invalid'}",
            "",
            "## Summary",
            "",
            f"- **Total Records:** {s.total_records}",
            f"- **Valid Records:** {s.valid_records}",
            f"- **Errors:** {s.error_count} ❌" if s.error_count else f"- **Errors:** {s.error_count}",
            f"- **Warnings:** {s.warning_count} ⚠️" if s.warning_count else f"- **Warnings:** {s.warning_count}",
            f"- **Infos:** {s.info_count}",
            "",
        ]

        if not self.errors and not self.warnings:
            lines.append("## ✅ All Checks Passed")
            lines.append("")
            lines.append("No validation issues found.")
            lines.append("")

        if self.errors:
            lines.append("## ❌ Errors")
            lines.append("")
            for module, errors in self.errors_by_module().items():
                lines.append(f"### {module} ({len(errors)})")
                lines.append("")
                for err in errors:
                    lines.append(f"- **{err.field}**: {err.message}")
                lines.append("")

        if self.warnings:
            lines.append("## ⚠️ Warnings")
            lines.append("")
            for w in self.warnings:
                lines.append(f"- **{w.module}**: {w.message}")
            lines.append("")

        if self.infos:
            lines.append("## ℹ️ Infos")
            lines.append("")
            for i in self.infos:
                lines.append(f"- **{i.module}**: {i.message}")
            lines.append("")

        return "\n".join(lines)

    def to_console_summary(self) -> str:
        """Generate a concise summary for console output."""
        lines = [self.summary_text(), ""]
        if not self.errors and not self.warnings:
            lines.append("✅ All validation checks passed!")
            return "\n".join(lines)
        for err in self.errors:
            lines.append(f"❌ {err.module} | {err.field}: {err.message}")
        for w in self.warnings:
            lines.append(f"⚠️ {w.module}: {w.message}")
        for i in self.infos:
            lines.append(f"ℹ️ {i.module}: {i.message}")
        return "\n".join(lines)
