"""Revenue record checks: income accruals and the cash receipt schedule."""

from __future__ import annotations

from typing import Sequence

from branch_budget.core.enums import StagingDomain
from branch_budget.core.schemas import CashScheduleRecord, IncomeAccrualRecord, StagingSnapshot
from ..models import CheckResult
from ..rules import validate_accrual, validate_cash_schedule
from ._common import LabelledResults, run_record_rules


class AccrualCheck:
    """Validate accrual amounts and same-day duplicates."""

    check_id = "accruals"
    domain = StagingDomain.ACCRUALS

    def validate(self, snapshot: StagingSnapshot) -> CheckResult:
        return run_record_rules(self.check_id, self.domain, snapshot, self._rules)

    @staticmethod
    def _rules(
        index: int, record: IncomeAccrualRecord, siblings: Sequence[IncomeAccrualRecord]
    ) -> LabelledResults:
        return [
            (
                f"Accrual {index + 1}",
                validate_accrual(
                    record.accrual_amount,
                    record.funding_source,
                    record.accrual_date,
                    record.org_unit_code,
                    siblings,
                ),
            )
        ]


class CashScheduleCheck:
    """Validate planned receipt amounts and one entry per source and day."""

    check_id = "cash_schedule"
    domain = StagingDomain.CASH_SCHEDULE

    def validate(self, snapshot: StagingSnapshot) -> CheckResult:
        return run_record_rules(self.check_id, self.domain, snapshot, self._rules)

    @staticmethod
    def _rules(
        index: int, record: CashScheduleRecord, siblings: Sequence[CashScheduleRecord]
    ) -> LabelledResults:
        return [
            (
                f"Receipt {index + 1}",
                validate_cash_schedule(
                    record.amount,
                    record.expected_date,
                    record.funding_source,
                    record.org_unit_code,
                    siblings,
                ),
            )
        ]
