"""Dict-backed record store.

Mirrors the semantics of the SQL store, including the compare-and-swap
guard on disbursement. Used as the test double and for throwaway local
runs.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from worklog_payroll.calculators.windows import DateWindow, as_utc
from worklog_payroll.exceptions import ConcurrentDisbursementError
from worklog_payroll.models import Employee, Payroll, WorkLog
from worklog_payroll.store.base import EMPLOYEE_MUTABLE_FIELDS


def _same_instant(left: datetime | None, right: datetime | None) -> bool:
    if left is None or right is None:
        return left is None and right is None
    return as_utc(left) == as_utc(right)


class InMemoryRecordStore:
    """Record store keeping everything in process memory."""

    def __init__(self) -> None:
        self.employees: dict[UUID, Employee] = {}
        self.work_logs: dict[UUID, WorkLog] = {}
        self.payrolls: dict[UUID, Payroll] = {}

    async def ping(self) -> None:
        return None

    async def list_employees(self) -> list[Employee]:
        return sorted(self.employees.values(), key=lambda e: (e.name, str(e.id)))

    async def get_employee(self, employee_id: UUID) -> Employee | None:
        return self.employees.get(employee_id)

    async def add_employee(self, employee: Employee) -> Employee:
        if employee.id is None:
            employee.id = uuid4()
        if employee.last_payroll_date is not None:
            employee.last_payroll_date = as_utc(employee.last_payroll_date)
        self.employees[employee.id] = employee
        return employee

    async def update_employee(
        self, employee_id: UUID, changes: dict[str, Any]
    ) -> Employee | None:
        employee = self.employees.get(employee_id)
        if employee is None:
            return None
        for name, value in changes.items():
            if name not in EMPLOYEE_MUTABLE_FIELDS:
                continue
            if name == "last_payroll_date" and value is not None:
                value = as_utc(value)
            setattr(employee, name, value)
        return employee

    async def delete_employee(self, employee_id: UUID, cascade: bool = False) -> bool:
        existed = self.employees.pop(employee_id, None) is not None
        if cascade:
            self.work_logs = {
                key: log
                for key, log in self.work_logs.items()
                if log.employee_id != employee_id
            }
            self.payrolls = {
                key: payroll
                for key, payroll in self.payrolls.items()
                if payroll.employee_id != employee_id
            }
        return existed

    async def add_work_log(self, log: WorkLog) -> WorkLog:
        if log.id is None:
            log.id = uuid4()
        log.date = as_utc(log.date)
        self.work_logs[log.id] = log
        return log

    async def list_work_logs(
        self, employee_id: UUID, window: DateWindow | None = None
    ) -> list[WorkLog]:
        logs = [
            log
            for log in self.work_logs.values()
            if log.employee_id == employee_id
            and (window is None or window.contains(log.date))
        ]
        return sorted(logs, key=lambda log: (as_utc(log.date), str(log.id)))

    async def list_payrolls(self, employee_id: UUID) -> list[Payroll]:
        payrolls = [p for p in self.payrolls.values() if p.employee_id == employee_id]
        return sorted(payrolls, key=lambda p: as_utc(p.pay_date), reverse=True)

    async def find_payroll_by_key(
        self, employee_id: UUID, idempotency_key: str
    ) -> Payroll | None:
        for payroll in self.payrolls.values():
            if (
                payroll.employee_id == employee_id
                and payroll.idempotency_key == idempotency_key
            ):
                return payroll
        return None

    async def record_disbursement(
        self, payroll: Payroll, expected_last_paid: datetime | None
    ) -> Payroll:
        employee = self.employees.get(payroll.employee_id)
        if employee is None or not _same_instant(
            employee.last_payroll_date, expected_last_paid
        ):
            raise ConcurrentDisbursementError(payroll.employee_id)

        if payroll.id is None:
            payroll.id = uuid4()
        employee.last_payroll_date = payroll.pay_date
        self.payrolls[payroll.id] = payroll
        return payroll
