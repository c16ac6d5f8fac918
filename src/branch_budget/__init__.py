"""Branch Budget Tools: validation and aggregation of branch staging budgets.

Branches fill in staging tables (contingent, accruals, cash schedule,
staffing, trips, utility calculations) per period. This package validates
those records against business rules and aggregates approved records into
revenue, cash-flow and consolidated ledgers.
"""

__all__ = [
    "__version__",
]

__version__ = "0.1.0"
