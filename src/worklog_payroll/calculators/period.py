"""Period pay aggregation shared by preview, disbursement and reporting."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal, InvalidOperation
from typing import Any

from worklog_payroll.calculators.types import LoggedWork, PeriodResult, RatedEmployee

ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """Coerce a stored numeric field; missing values count as zero."""
    if value is None:
        return ZERO
    if isinstance(value, bool):
        raise InvalidOperation(f"Not a numeric value: {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        result = Decimal(str(value))
    if not result.is_finite():
        raise InvalidOperation(f"Non-finite numeric value: {value!r}")
    return result


def compute_period(
    employee: RatedEmployee, logs: Iterable[LoggedWork]
) -> PeriodResult:
    """Aggregate hours, gross pay, deductions and net pay over ``logs``.

    ``logs`` must already be restricted to the employee and the window.
    A field missing on one log counts as zero for that log only. Net pay
    is gross minus deductions and is allowed to go negative.
    """
    hours1 = ZERO
    hours2 = ZERO
    deductions = ZERO
    count = 0

    for log in logs:
        hours1 += to_decimal(getattr(log, "hours_payrate1", None))
        hours2 += to_decimal(getattr(log, "hours_payrate2", None))
        deductions += to_decimal(getattr(log, "deduction", None))
        count += 1

    rate1 = to_decimal(getattr(employee, "pay_rate1", None))
    rate2 = to_decimal(getattr(employee, "pay_rate2", None))
    total_pay = hours1 * rate1 + hours2 * rate2

    return PeriodResult(
        hours_payrate1=hours1,
        hours_payrate2=hours2,
        total_hours=hours1 + hours2,
        total_pay=total_pay,
        deductions=deductions,
        net_pay=total_pay - deductions,
        log_count=count,
    )
