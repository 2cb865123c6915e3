"""Type definitions for the payroll calculation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Protocol


class RatedEmployee(Protocol):
    """Anything carrying the two hourly rates."""

    pay_rate1: Decimal | None
    pay_rate2: Decimal | None


class LoggedWork(Protocol):
    """Anything carrying one day's hours and deduction."""

    date: datetime
    hours_payrate1: Decimal | None
    hours_payrate2: Decimal | None
    deduction: Decimal | None


@dataclass(frozen=True)
class PeriodResult:
    """Aggregated pay for one employee over one window."""

    hours_payrate1: Decimal = Decimal("0")
    hours_payrate2: Decimal = Decimal("0")
    total_hours: Decimal = Decimal("0")
    total_pay: Decimal = Decimal("0")
    deductions: Decimal = Decimal("0")
    net_pay: Decimal = Decimal("0")  # may be negative
    log_count: int = 0
