"""Core enumerations used across the package."""

from __future__ import annotations

from enum import Enum


class RecordStatus(str, Enum):
    """Lifecycle status of a staging record.

    Values are strings to ease serialization and CLI interchange.
    """

    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"


class FundingSource(str, Enum):
    """Origin of money: fee-paying services, state budget, subsidy/grant."""

    PU = "PU"
    RB = "RB"
    DOTA = "DOTA"


class StagingDomain(str, Enum):
    """Staging tables a branch fills in for one period."""

    CONTINGENT = "contingent"
    ACCRUALS = "accruals"
    CASH_SCHEDULE = "cash_schedule"
    STAFFING = "staffing"
    TRIPS = "trips"
    CALCULATIONS = "calculations"


class RevenueType(str, Enum):
    TUITION = "tuition"
    BUDGET = "budget"
    GRANTS = "grants"
    OTHER = "other"


class FlowType(str, Enum):
    INFLOW = "inflow"
    OUTFLOW = "outflow"


class PaymentStatus(str, Enum):
    """Settlement state of a cash schedule item."""

    PENDING = "PENDING"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


class EmploymentStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    ON_LEAVE = "ON_LEAVE"
    DISMISSED = "DISMISSED"


class AlertType(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class UserRole(str, Enum):
    """Roles supplied by the auth layer; the engine itself is role-agnostic."""

    BRANCH_ECONOMIST = "branch_economist"
    BRANCH_ACCOUNTANT = "branch_accountant"
    BRANCH_HR = "branch_hr"
    HQ_CHIEF_ECONOMIST = "hq_chief_economist"
    HQ_BOARD = "hq_board"
    ADMIN = "admin"


__all__ = [
    "RecordStatus",
    "FundingSource",
    "StagingDomain",
    "RevenueType",
    "FlowType",
    "PaymentStatus",
    "EmploymentStatus",
    "AlertType",
    "UserRole",
]
