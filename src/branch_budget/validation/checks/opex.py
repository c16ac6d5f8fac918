"""Operating expense checks: business trips and utility calculations."""

from __future__ import annotations

from typing import Sequence

from branch_budget.core.enums import StagingDomain
from branch_budget.core.schemas import StagingSnapshot, TripRecord, UtilityCalculationRecord
from ..models import CheckResult
from ..rules import validate_trip, validate_utility_calculation
from ._common import LabelledResults, run_record_rules


class TripCheck:
    """Validate trip duration, amount and per-employee overlaps."""

    check_id = "trips"
    domain = StagingDomain.TRIPS

    def validate(self, snapshot: StagingSnapshot) -> CheckResult:
        return run_record_rules(self.check_id, self.domain, snapshot, self._rules)

    @staticmethod
    def _rules(index: int, record: TripRecord, siblings: Sequence[TripRecord]) -> LabelledResults:
        return [
            (
                f"Trip {index + 1}",
                validate_trip(
                    record.employee_name,
                    record.destination,
                    record.start_date,
                    record.end_date,
                    record.total_amount,
                    siblings,
                ),
            )
        ]


class UtilityCalculationCheck:
    """Validate utility amounts and one calculation per service and month."""

    check_id = "calculations"
    domain = StagingDomain.CALCULATIONS

    def validate(self, snapshot: StagingSnapshot) -> CheckResult:
        return run_record_rules(self.check_id, self.domain, snapshot, self._rules)

    @staticmethod
    def _rules(
        index: int,
        record: UtilityCalculationRecord,
        siblings: Sequence[UtilityCalculationRecord],
    ) -> LabelledResults:
        return [
            (
                f"Calculation {record.service_name}",
                validate_utility_calculation(
                    record.service_name,
                    record.calculation_method,
                    record.calculated_amount,
                    record.calculation_date,
                    siblings,
                ),
            )
        ]
