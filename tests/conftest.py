"""Pytest fixtures for payroll service tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import UUID

import pytest

from worklog_payroll.models import Employee, WorkLog
from worklog_payroll.services import EmployeeService, PayrollService, WorkLogService
from worklog_payroll.store import InMemoryRecordStore

FIXED_NOW = datetime(2025, 3, 20, 12, 0, tzinfo=timezone.utc)


class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def make_log(
    employee_id: UUID,
    date: datetime,
    hours_payrate1: str | Decimal | None = "0",
    hours_payrate2: str | Decimal | None = "0",
    deduction: str | Decimal | None = "0",
) -> WorkLog:
    """Build an unsaved work log; string amounts become Decimal."""

    def _amount(value: str | Decimal | None) -> Decimal | None:
        return Decimal(value) if isinstance(value, str) else value

    return WorkLog(
        employee_id=employee_id,
        date=date,
        hours_payrate1=_amount(hours_payrate1),
        hours_payrate2=_amount(hours_payrate2),
        deduction=_amount(deduction),
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(FIXED_NOW)


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def payroll_service(store: InMemoryRecordStore, clock: FixedClock) -> PayrollService:
    return PayrollService(store, clock=clock)


@pytest.fixture
def employee_service(store: InMemoryRecordStore) -> EmployeeService:
    return EmployeeService(store)


@pytest.fixture
def work_log_service(store: InMemoryRecordStore) -> WorkLogService:
    return WorkLogService(store)


@pytest.fixture
async def alice(store: InMemoryRecordStore) -> Employee:
    """Never-paid employee at 10/15 per hour."""
    return await store.add_employee(
        Employee(
            name="Alice",
            role="Engineer",
            pay_rate1=Decimal("10"),
            pay_rate2=Decimal("15"),
            last_payroll_date=None,
        )
    )


@pytest.fixture
async def bob(store: InMemoryRecordStore) -> Employee:
    """Never-paid employee at 20 per hour on the first tier only."""
    return await store.add_employee(
        Employee(
            name="Bob",
            role="Technician",
            pay_rate1=Decimal("20"),
            pay_rate2=Decimal("0"),
            last_payroll_date=None,
        )
    )
