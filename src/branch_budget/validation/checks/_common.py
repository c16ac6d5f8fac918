"""Shared helpers for record checks."""

from __future__ import annotations

import logging
from typing import Callable, List, Sequence, Tuple

from branch_budget.core.enums import StagingDomain
from branch_budget.core.schemas import StagingRecord, StagingSnapshot
from ..config import get_module_label, get_severity
from ..models import CheckResult, ErrorKind, RuleResult, ValidationError

logger = logging.getLogger(__name__)

# (field label, rule outcome) pairs produced for one record
LabelledResults = List[Tuple[str, RuleResult]]
RecordRules = Callable[[int, StagingRecord, Sequence[StagingRecord]], LabelledResults]


def siblings_of(records: Sequence[StagingRecord], index: int) -> List[StagingRecord]:
    """All records except the one at ``index`` (self-exclusion by position)."""
    return [r for i, r in enumerate(records) if i != index]


def run_record_rules(
    check_id: str,
    domain: StagingDomain,
    snapshot: StagingSnapshot,
    rules: RecordRules,
    module: str | None = None,
) -> CheckResult:
    """Apply ``rules`` to every record of ``domain`` and collect violations."""
    records = snapshot.records(domain)
    module = module or get_module_label(domain)
    severity = get_severity(check_id)
    errors: List[ValidationError] = []
    invalid_ids: List[str] = []

    for index, record in enumerate(records):
        failed = False
        for label, result in rules(index, record, siblings_of(records, index)):
            if result.is_valid:
                continue
            failed = True
            errors.append(
                ValidationError(
                    module=module,
                    field=label,
                    message=result.error or "",
                    severity=severity,
                    kind=result.kind or ErrorKind.FIELD,
                )
            )
        if failed:
            invalid_ids.append(f"{domain.value}:{record.id}")
            logger.debug("%s record %s failed %s rules", domain.value, record.id, check_id)

    return CheckResult(
        check_id=check_id,
        module=module,
        records_checked=len(records),
        passed=not errors,
        fail_count=len(errors),
        errors=errors,
        invalid_record_ids=tuple(invalid_ids),
    )
