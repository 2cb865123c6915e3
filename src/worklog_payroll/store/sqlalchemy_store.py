"""SQLAlchemy-backed record store."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import delete, select, text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from worklog_payroll.calculators.windows import DateWindow, as_utc
from worklog_payroll.exceptions import ConcurrentDisbursementError, StoreError
from worklog_payroll.models import Employee, Payroll, WorkLog
from worklog_payroll.store.base import EMPLOYEE_MUTABLE_FIELDS

logger = logging.getLogger(__name__)


def window_clauses(window: DateWindow) -> list[Any]:
    """Translate a window into WHERE clauses on WorkLog.date."""
    clauses: list[Any] = []
    if window.start is not None:
        if window.start_inclusive:
            clauses.append(WorkLog.date >= window.start)
        else:
            clauses.append(WorkLog.date > window.start)
    if window.end is not None:
        if window.end_inclusive:
            clauses.append(WorkLog.date <= window.end)
        else:
            clauses.append(WorkLog.date < window.end)
    return clauses


class SqlAlchemyRecordStore:
    """Record store over one ``AsyncSession``.

    Each write commits its own unit of work. ``record_disbursement``
    performs the guarded employee update and the payroll insert in a
    single transaction.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def _translate_errors(self, operation: str) -> AsyncGenerator[None, None]:
        try:
            yield
        except SQLAlchemyError as exc:
            logger.exception("Record store failure during %s", operation)
            await self.session.rollback()
            raise StoreError(operation) from exc

    async def ping(self) -> None:
        async with self._translate_errors("ping"):
            await self.session.execute(text("SELECT 1"))

    # ------------------------------------------------------------------
    # Employees
    # ------------------------------------------------------------------

    async def list_employees(self) -> list[Employee]:
        async with self._translate_errors("list_employees"):
            result = await self.session.execute(
                select(Employee).order_by(Employee.name, Employee.id)
            )
            return list(result.scalars().all())

    async def get_employee(self, employee_id: UUID) -> Employee | None:
        async with self._translate_errors("get_employee"):
            return await self.session.get(Employee, employee_id)

    async def add_employee(self, employee: Employee) -> Employee:
        async with self._translate_errors("add_employee"):
            if employee.last_payroll_date is not None:
                employee.last_payroll_date = as_utc(employee.last_payroll_date)
            self.session.add(employee)
            await self.session.commit()
            await self.session.refresh(employee)
            return employee

    async def update_employee(
        self, employee_id: UUID, changes: dict[str, Any]
    ) -> Employee | None:
        async with self._translate_errors("update_employee"):
            employee = await self.session.get(Employee, employee_id)
            if employee is None:
                return None
            for name, value in changes.items():
                if name not in EMPLOYEE_MUTABLE_FIELDS:
                    continue
                if name == "last_payroll_date" and value is not None:
                    value = as_utc(value)
                setattr(employee, name, value)
            await self.session.commit()
            await self.session.refresh(employee)
            return employee

    async def delete_employee(self, employee_id: UUID, cascade: bool = False) -> bool:
        async with self._translate_errors("delete_employee"):
            result = await self.session.execute(
                delete(Employee).where(Employee.id == employee_id)
            )
            if cascade:
                await self.session.execute(
                    delete(WorkLog).where(WorkLog.employee_id == employee_id)
                )
                await self.session.execute(
                    delete(Payroll).where(Payroll.employee_id == employee_id)
                )
            await self.session.commit()
            return (result.rowcount or 0) > 0

    # ------------------------------------------------------------------
    # Work logs
    # ------------------------------------------------------------------

    async def add_work_log(self, log: WorkLog) -> WorkLog:
        async with self._translate_errors("add_work_log"):
            log.date = as_utc(log.date)
            self.session.add(log)
            await self.session.commit()
            await self.session.refresh(log)
            return log

    async def list_work_logs(
        self, employee_id: UUID, window: DateWindow | None = None
    ) -> list[WorkLog]:
        query = select(WorkLog).where(WorkLog.employee_id == employee_id)
        if window is not None:
            query = query.where(*window_clauses(window))
        query = query.order_by(WorkLog.date, WorkLog.id)

        async with self._translate_errors("list_work_logs"):
            result = await self.session.execute(query)
            return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Payrolls
    # ------------------------------------------------------------------

    async def list_payrolls(self, employee_id: UUID) -> list[Payroll]:
        async with self._translate_errors("list_payrolls"):
            result = await self.session.execute(
                select(Payroll)
                .where(Payroll.employee_id == employee_id)
                .order_by(Payroll.pay_date.desc())
            )
            return list(result.scalars().all())

    async def find_payroll_by_key(
        self, employee_id: UUID, idempotency_key: str
    ) -> Payroll | None:
        async with self._translate_errors("find_payroll_by_key"):
            result = await self.session.execute(
                select(Payroll).where(
                    Payroll.employee_id == employee_id,
                    Payroll.idempotency_key == idempotency_key,
                )
            )
            return result.scalar_one_or_none()

    async def record_disbursement(
        self, payroll: Payroll, expected_last_paid: datetime | None
    ) -> Payroll:
        if expected_last_paid is None:
            guard = Employee.last_payroll_date.is_(None)
        else:
            guard = Employee.last_payroll_date == expected_last_paid

        async with self._translate_errors("record_disbursement"):
            # Advance the checkpoint first; the insert is the point of no return
            result = await self.session.execute(
                update(Employee)
                .where(Employee.id == payroll.employee_id, guard)
                .values(last_payroll_date=payroll.pay_date)
            )
            if result.rowcount == 0:
                await self.session.rollback()
                raise ConcurrentDisbursementError(payroll.employee_id)

            self.session.add(payroll)
            await self.session.commit()
            await self.session.refresh(payroll)
            return payroll
