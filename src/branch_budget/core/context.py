"""Explicit scope passed into every orchestrator call."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .enums import UserRole
from .utils import validate_period_ym


@dataclass(frozen=True)
class ScopeContext:
    """Branch, period and (optionally) acting user of an operation.

    Attributes:
        org_unit_code: Branch code the operation is scoped to.
        period_ym: Period key in "YYYY-MM" form.
        user_id: Acting user, when the caller knows it.
        role: Role of the acting user, consumed only by callers.
    """

    org_unit_code: str
    period_ym: str
    user_id: Optional[str] = None
    role: Optional[UserRole] = None

    def __post_init__(self) -> None:
        if not self.org_unit_code:
            raise ValueError("org_unit_code is required")
        if not validate_period_ym(self.period_ym):
            raise ValueError(f"Invalid period_ym: {self.period_ym!r}. Expected YYYY-MM.")

    @property
    def key(self) -> str:
        return f"{self.org_unit_code}/{self.period_ym}"


__all__ = ["ScopeContext"]
