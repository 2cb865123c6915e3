"""Payroll calculation."""

from worklog_payroll.calculators.period import compute_period, to_decimal
from worklog_payroll.calculators.types import PeriodResult
from worklog_payroll.calculators.windows import (
    DateWindow,
    as_utc,
    calendar_month_window,
    month_bounds,
    resolve_report_period,
    unpaid_window,
)

__all__ = [
    "compute_period",
    "to_decimal",
    "PeriodResult",
    "DateWindow",
    "as_utc",
    "calendar_month_window",
    "month_bounds",
    "resolve_report_period",
    "unpaid_window",
]
