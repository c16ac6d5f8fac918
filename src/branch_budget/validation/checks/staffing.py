"""Staffing record check."""

from __future__ import annotations

from typing import Sequence

from branch_budget.core.enums import StagingDomain
from branch_budget.core.schemas import StaffingRecord, StagingSnapshot
from ..models import CheckResult
from ..rules import validate_employee
from ._common import LabelledResults, run_record_rules


class StaffingCheck:
    """Validate employee uniqueness and salary bounds."""

    check_id = "staffing"
    domain = StagingDomain.STAFFING

    def validate(self, snapshot: StagingSnapshot) -> CheckResult:
        return run_record_rules(self.check_id, self.domain, snapshot, self._rules)

    @staticmethod
    def _rules(
        index: int, record: StaffingRecord, siblings: Sequence[StaffingRecord]
    ) -> LabelledResults:
        return [
            (
                f"Employee {record.employee_id}",
                validate_employee(
                    record.employee_id,
                    record.full_name,
                    record.position,
                    record.base_salary,
                    record.bonus,
                    record.org_unit_code,
                    record.period_ym,
                    siblings,
                ),
            )
        ]
