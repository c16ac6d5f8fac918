"""Repository seam for staging data.

The persistent record store is an external collaborator. The engine only
relies on the ``StagingRepository`` protocol: an async, scoped read per
staging domain. ``InMemoryStagingRepository`` implements it over a list of
records and is what the CLI and tests use, loading records from YAML.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Protocol

import yaml

from .context import ScopeContext
from .enums import RecordStatus, StagingDomain
from .schemas import StagingRecord, StagingSnapshot, record_from_dict

logger = logging.getLogger(__name__)


class RepositoryError(RuntimeError):
    """Raised when staging records cannot be read."""


class StagingRepository(Protocol):
    """Scoped read access to staging tables."""

    async def find_by_org_unit_and_period(
        self, domain: StagingDomain, org_unit_code: str, period_ym: str
    ) -> List[StagingRecord]:
        """Return all records of ``domain`` for the branch and period, any status."""
        ...


class InMemoryStagingRepository:
    """Repository backed by an in-memory list of records."""

    def __init__(self, records: Iterable[StagingRecord] = ()) -> None:
        self._records: Dict[StagingDomain, List[StagingRecord]] = {d: [] for d in StagingDomain}
        for record in records:
            self.add(record)

    def add(self, record: StagingRecord) -> None:
        self._records[record.domain].append(record)

    def all(self) -> List[StagingRecord]:
        """Return every stored record across all domains."""
        out: List[StagingRecord] = []
        for domain in StagingDomain:
            out.extend(self._records[domain])
        return out

    async def find_by_org_unit_and_period(
        self, domain: StagingDomain, org_unit_code: str, period_ym: str
    ) -> List[StagingRecord]:
        return [
            r
            for r in self._records[StagingDomain(domain)]
            if r.org_unit_code == org_unit_code and r.period_ym == period_ym
        ]

    @classmethod
    def from_yaml(cls, data_file: Path) -> "InMemoryStagingRepository":
        """Load records from a YAML file with one top-level list per domain.

        Example file::

            contingent:
              - id: c1
                org_unit_code: ALM
                period_ym: "2024-12"
                ...
            accruals: []

        Raises:
            FileNotFoundError: If ``data_file`` does not exist.
            ValueError: If the YAML is malformed or a record is invalid.
        """
        if not data_file.exists():
            raise FileNotFoundError(f"Staging data file not found: {data_file}")
        try:
            with data_file.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse staging data {data_file}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Staging data {data_file} must be a mapping of domain lists")

        records: List[StagingRecord] = []
        for key, items in data.items():
            try:
                domain = StagingDomain(key)
            except ValueError:
                logger.warning("Skipping unknown staging domain '%s' in %s", key, data_file)
                continue
            for item in items or []:
                records.append(record_from_dict(domain, item))
        logger.debug("Loaded %d staging records from %s", len(records), data_file)
        return cls(records)


async def load_snapshot(
    repository: StagingRepository, scope: ScopeContext, approved_only: bool = False
) -> StagingSnapshot:
    """Fetch all staging domains for ``scope`` concurrently.

    Args:
        repository: Source of staging records.
        scope: Branch and period to read.
        approved_only: Keep only approved records (aggregation input).

    Returns:
        A snapshot scoped to ``scope``.
    """
    domains = list(StagingDomain)
    results = await asyncio.gather(
        *(
            repository.find_by_org_unit_and_period(d, scope.org_unit_code, scope.period_ym)
            for d in domains
        )
    )
    records: List[StagingRecord] = []
    for items in results:
        records.extend(
            r for r in items if not approved_only or r.status == RecordStatus.APPROVED
        )
    return StagingSnapshot.from_records(scope.org_unit_code, scope.period_ym, records)


__all__ = [
    "RepositoryError",
    "StagingRepository",
    "InMemoryStagingRepository",
    "load_snapshot",
]
