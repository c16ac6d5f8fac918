"""Record field check.

Runs ``validate_record`` over every record of every domain. Optional in the
orchestrator; enabled with ``include_field_checks=True``.
"""

from __future__ import annotations

from typing import List

from branch_budget.core.enums import StagingDomain
from branch_budget.core.schemas import StagingSnapshot
from ..config import get_module_label, get_severity
from ..fields import validate_record
from ..models import CheckResult, ErrorKind, ValidationError


class RecordFieldsCheck:
    """Validate required fields and formats of all records."""

    check_id = "record_fields"
    domain = None  # spans all domains

    def validate(self, snapshot: StagingSnapshot) -> CheckResult:
        severity = get_severity(self.check_id)
        errors: List[ValidationError] = []
        invalid_ids: List[str] = []
        for domain in StagingDomain:
            module = get_module_label(domain)
            for record in snapshot.records(domain):
                outcome = validate_record(record)
                if outcome.is_valid:
                    continue
                invalid_ids.append(f"{domain.value}:{record.id}")
                for field_name, message in outcome.issues:
                    errors.append(
                        ValidationError(
                            module=module,
                            field=f"{record.id}.{field_name}",
                            message=message,
                            severity=severity,
                            kind=ErrorKind.FIELD,
                        )
                    )
        return CheckResult(
            check_id=self.check_id,
            module="Fields",
            records_checked=snapshot.record_count(),
            passed=not errors,
            fail_count=len(errors),
            errors=errors,
            invalid_record_ids=tuple(invalid_ids),
        )
