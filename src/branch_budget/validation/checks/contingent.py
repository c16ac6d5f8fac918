"""Contingent record check.

Classes must hold between 15 and 30 students (pre-school groups have no
minimum) and each (grade, profile, language) class may appear once per period.
"""

from __future__ import annotations

from typing import Sequence

from branch_budget.core.enums import StagingDomain
from branch_budget.core.schemas import ContingentRecord, StagingSnapshot
from ..models import CheckResult
from ..rules import validate_student_count, validate_unique_class
from ._common import LabelledResults, run_record_rules


class ContingentCheck:
    """Validate student counts and class uniqueness."""

    check_id = "contingent"
    domain = StagingDomain.CONTINGENT

    def validate(self, snapshot: StagingSnapshot) -> CheckResult:
        return run_record_rules(self.check_id, self.domain, snapshot, self._rules)

    @staticmethod
    def _rules(
        index: int, record: ContingentRecord, siblings: Sequence[ContingentRecord]
    ) -> LabelledResults:
        return [
            (
                f"Class {record.grade_level} (row {index + 1})",
                validate_student_count(record.student_count, record.grade_level),
            ),
            (
                f"Class {record.grade_level}",
                validate_unique_class(
                    record.grade_level,
                    record.education_profile,
                    record.language,
                    record.org_unit_code,
                    record.period_ym,
                    siblings,
                ),
            ),
        ]
