"""Record checks base interface.

This module defines the protocol (interface) that all per-domain record checks
must implement. Each check runs the business rules of one staging domain over
every record of a snapshot, comparing each record with its siblings.

To implement a new record check:

1. Create a new file in this directory (e.g., `my_check.py`)
2. Define a class that implements the RecordCheck protocol
3. Build the result with `run_record_rules()` from `_common.py`
4. Add the check to the ALL_CHECKS list in registry.py

Example:
    ```python
    # checks/my_check.py
    from branch_budget.core.enums import StagingDomain
    from ..models import CheckResult
    from ._common import run_record_rules

    class MyCheck:
        check_id = "my_check"
        domain = StagingDomain.TRIPS

        def validate(self, snapshot) -> CheckResult:
            return run_record_rules(self.check_id, self.domain, snapshot, self._rules)

        def _rules(self, index, record, siblings):
            return [(f"Trip {index + 1}", some_rule(record, siblings))]
    ```
"""

from __future__ import annotations

from typing import Protocol

from branch_budget.core.enums import StagingDomain
from branch_budget.core.schemas import StagingSnapshot
from ..models import CheckResult


class RecordCheck(Protocol):
    """Protocol defining the interface for record checks.

    Attributes:
        check_id: Identifier used for severity lookup and reporting.
        domain: Staging domain whose records the check examines.
    """

    check_id: str
    domain: StagingDomain

    def validate(self, snapshot: StagingSnapshot) -> CheckResult:
        """Run the check over every record of ``domain`` in ``snapshot``.

        Returns:
            A single CheckResult with one error per rule violation.
        """
        ...


__all__ = ["RecordCheck"]
